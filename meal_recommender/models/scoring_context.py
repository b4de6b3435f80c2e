# meal_recommender/models/scoring_context.py
"""
Scoring context models for the multi-objective scorer.

Defines the context in which a single candidate is scored. Each scorer
evaluates one aspect of the candidate and returns a ScoringResult; the
results are combined into an AggregateScore.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Any

from .bandit import BanditState
from .context import RecommendationContext
from .meal import MealCandidate
from .profile import UserProfile


@dataclass
class ScoringContext:
    """
    Everything a scorer may look at for one candidate.

    The portion multiplier is the one chosen by the adjuster; scorers that
    depend on quantity apply it themselves.
    """
    meal: MealCandidate
    profile: UserProfile
    request: RecommendationContext
    bandit_state: BanditState
    portion_multiplier: float = 1.0


@dataclass
class ScoringResult:
    """
    Result from a scorer's evaluation of a candidate.

    Contains:
    - Normalized score (0.0 to 1.0)
    - Detailed breakdown for debugging
    """

    scorer_name: str
    raw_score: float  # 0.0 (worst fit) to 1.0 (perfect fit)
    details: Dict[str, Any] = field(default_factory=dict)

    def get_weighted_score(self, weight: float) -> float:
        """
        Calculate weighted score.

        Args:
            weight: Weight for this scorer

        Returns:
            raw_score * weight
        """
        return self.raw_score * weight

    def __str__(self) -> str:
        return f"{self.scorer_name}: {self.raw_score:.3f}"


@dataclass
class AggregateScore:
    """
    Aggregated score from all scorers for one candidate.
    """

    meal_id: str
    individual_scores: List[ScoringResult]
    weights: Dict[str, float]
    final_score: float  # Weighted sum, rounded

    def get_breakdown(self) -> List[Dict[str, Any]]:
        """
        Get detailed breakdown of score components.

        Returns:
            List of dicts with scorer, raw_score, weight, contribution
        """
        breakdown = []
        for result in self.individual_scores:
            weight = self.weights.get(result.scorer_name, 0.0)
            breakdown.append({
                'scorer': result.scorer_name,
                'raw_score': result.raw_score,
                'weight': weight,
                'contribution': result.get_weighted_score(weight)
            })

        return breakdown

    def __str__(self) -> str:
        return f"Meal {self.meal_id}: {self.final_score:.4f}"
