# meal_recommender/scorers/base_scorer.py
"""
Base scorer class for the multi-objective scorer.

Defines the interface all sub-scorers implement. Each sub-scorer looks at
one aspect of a candidate and returns a normalized 0-1 score.
"""
from abc import ABC, abstractmethod
from typing import Optional

from meal_recommender.config import RecommenderConfig
from meal_recommender.models.scoring_context import ScoringContext, ScoringResult

# Score used when the profile carries no data for an objective
NEUTRAL_SCORE = 0.5


class Scorer(ABC):
    """
    Abstract base class for candidate sub-scorers.

    Each scorer evaluates how well a candidate fits one objective,
    returning a normalized score from 0.0 (poor fit) to 1.0 (excellent fit).

    Scorers have access to:
    - The candidate and its portion multiplier
    - The user profile and request context
    - The bandit state (exploration only)
    - Engine configuration
    """

    # Human-readable reason shown when this objective ranks in the top two
    label: str = ""

    def __init__(self, config: Optional[RecommenderConfig] = None):
        """
        Initialize scorer.

        Args:
            config: Engine configuration; defaults if None
        """
        self.config = config or RecommenderConfig()

    @abstractmethod
    def calculate_score(self, context: ScoringContext) -> ScoringResult:
        """
        Calculate score for one candidate.

        Args:
            context: Scoring context for the candidate

        Returns:
            ScoringResult with raw_score (0-1) and details dict
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Scorer name (matches the scoring weight key).

        Example: "goalAlignment", "macroFit"
        """
        pass

    def _result(self, score: float, **details) -> ScoringResult:
        return ScoringResult(scorer_name=self.name, raw_score=score, details=details)

    def _clamp_score(self, score: float) -> float:
        """
        Clamp score to valid 0.0-1.0 range.
        """
        return max(0.0, min(1.0, score))
