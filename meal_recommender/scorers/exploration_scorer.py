# meal_recommender/scorers/exploration_scorer.py
"""
Exploration Scorer - Thompson Sampling bonus from the bandit arms.

Thin adapter over ExplorationEngine so the bandit bonus is scored and
weighted like every other objective.
"""
from typing import Optional

from meal_recommender.bandit import ExplorationEngine
from meal_recommender.config import RecommenderConfig
from meal_recommender.models.scoring_context import ScoringContext, ScoringResult
from .base_scorer import Scorer


class ExplorationScorer(Scorer):
    """Samples the candidate's arms and scales by exploration strength."""

    label = "Recommended for you"

    def __init__(self, config: Optional[RecommenderConfig] = None,
                 exploration: Optional[ExplorationEngine] = None):
        super().__init__(config)
        self.exploration = exploration or ExplorationEngine()

    @property
    def name(self) -> str:
        return "explorationBonus"

    def calculate_score(self, context: ScoringContext) -> ScoringResult:
        strength = context.request.exploration_strength
        bonus, samples = self.exploration.exploration_bonus(
            context.meal, context.bandit_state, strength
        )
        return self._result(
            self._clamp_score(bonus),
            samples=samples,
            exploration_strength=strength,
        )
