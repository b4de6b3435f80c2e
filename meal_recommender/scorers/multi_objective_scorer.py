# meal_recommender/scorers/multi_objective_scorer.py
"""
Multi-objective scorer: combines every sub-scorer into one ranking score.

The final score is the weighted sum of the six sub-scores rounded to four
decimal places. Because each sub-score is in [0, 1] and the weights sum to
1.0, the final score is in [0, 1] as well.
"""
from typing import List, Optional, Tuple

from meal_recommender.bandit import ExplorationEngine
from meal_recommender.config import RecommenderConfig
from meal_recommender.models.scoring_context import (
    AggregateScore,
    ScoringContext,
    ScoringResult,
)
from . import create_scorer, get_available_scorers
from .base_scorer import Scorer

REASON_COUNT = 2
SCORE_DECIMALS = 4


class MultiObjectiveScorer:
    """
    Runs all sub-scorers for a candidate and aggregates them.

    Args:
        config: Engine configuration (weights)
        exploration: Exploration engine shared with feedback application
    """

    def __init__(self, config: Optional[RecommenderConfig] = None,
                 exploration: Optional[ExplorationEngine] = None):
        self.config = config or RecommenderConfig()
        self.scorers: List[Scorer] = [
            create_scorer(name, self.config, exploration=exploration)
            for name in get_available_scorers()
        ]

    @property
    def weights(self):
        return dict(self.config.scoring_weights)

    def score(self, context: ScoringContext) -> Tuple[AggregateScore, List[str]]:
        """
        Score one candidate.

        Args:
            context: Scoring context with the chosen portion multiplier

        Returns:
            Tuple of (AggregateScore, top reasons)
        """
        results: List[ScoringResult] = [s.calculate_score(context) for s in self.scorers]
        weights = self.config.scoring_weights

        total = 0.0
        for result in results:
            total += result.get_weighted_score(weights.get(result.scorer_name, 0.0))

        aggregate = AggregateScore(
            meal_id=context.meal.meal_id,
            individual_scores=results,
            weights=dict(weights),
            final_score=round(total, SCORE_DECIMALS),
        )
        return aggregate, self.top_reasons(results)

    def top_reasons(self, results: List[ScoringResult]) -> List[str]:
        """
        Labels of the highest sub-scores.

        Ties keep scorer order (goal, macro, taste, diversity,
        exploration, prep time).
        """
        labels = {s.name: s.label for s in self.scorers}
        ranked = sorted(results, key=lambda r: r.raw_score, reverse=True)
        return [labels[r.scorer_name] for r in ranked[:REASON_COUNT]]
