# meal_recommender/scorers/prep_time_scorer.py
"""
Prep Time Scorer - prefers quicker meals.
"""
from meal_recommender.models.scoring_context import ScoringContext, ScoringResult
from .base_scorer import Scorer

# (max minutes, score), checked in order
PREP_TIME_STEPS = [
    (15, 1.0),
    (30, 0.7),
    (45, 0.5),
]
SLOW_PREP_SCORE = 0.3


class PrepTimeScorer(Scorer):
    """Step-function score on preparation time."""

    label = "Quick to prepare"

    @property
    def name(self) -> str:
        return "prepTimeBonus"

    def calculate_score(self, context: ScoringContext) -> ScoringResult:
        minutes = context.meal.prep_time_min
        for limit, score in PREP_TIME_STEPS:
            if minutes <= limit:
                return self._result(score, prep_time_min=minutes)
        return self._result(SLOW_PREP_SCORE, prep_time_min=minutes)
