# meal_recommender/filters/base_filter.py
"""
Base class for meal candidate filters.

Defines the standard interface and common behaviors for all filters
in the recommendation pipeline.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Sequence

from meal_recommender.models import (
    FilteredOutCounts,
    MealCandidate,
    RecommendationContext,
    RejectionBucket,
    UserProfile,
)


@dataclass(frozen=True)
class FilterTraceEntry:
    """Why one candidate was rejected."""
    meal_id: str
    title: str
    bucket: RejectionBucket
    detail: str

    def __str__(self) -> str:
        return f"{self.meal_id} ({self.title}): {self.bucket.value} - {self.detail}"


@dataclass
class FilterOutcome:
    """
    Result of running a filter over a candidate pool.

    Attributes:
        passed: Surviving candidates in input order
        counts: Rejection counters by bucket
        trace: One entry per rejected candidate
        rules_applied: Audit lines for safety/diet/macro rejections
    """
    passed: List[MealCandidate] = field(default_factory=list)
    counts: FilteredOutCounts = field(default_factory=FilteredOutCounts)
    trace: List[FilterTraceEntry] = field(default_factory=list)
    rules_applied: List[str] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.trace)


class BaseFilter(ABC):
    """
    Abstract base class for meal candidate filters.

    All filters follow a common contract:
    - Accept the candidate pool plus the profile and request context
    - Return a FilterOutcome with survivors, counters and a rejection trace
    - Never raise for unsafe or non-compliant candidates; rejection is an
      outcome, not an error

    Subclasses must implement:
    - filter_candidates(): Core filtering logic
    """

    @abstractmethod
    def filter_candidates(
        self,
        candidates: Sequence[MealCandidate],
        profile: UserProfile,
        context: RecommendationContext,
    ) -> FilterOutcome:
        """
        Apply filter logic to candidates.

        Args:
            candidates: Candidate pool for the request
            profile: User profile
            context: Request context

        Returns:
            FilterOutcome
        """
        pass

    def get_filter_stats(self, original_count: int, outcome: FilterOutcome) -> str:
        """
        Get human-readable filter statistics.

        Args:
            original_count: Number of candidates before filtering
            outcome: Result of filter_candidates()

        Returns:
            Formatted statistics string
        """
        filtered_count = len(outcome.passed)
        rejected = original_count - filtered_count

        if rejected == 0:
            return f"All {original_count} candidates passed filters"

        percent = (rejected / original_count * 100) if original_count > 0 else 0
        stats = f"Filtered {rejected}/{original_count} candidates ({percent:.1f}% rejected)"

        details = [f"{key}: {count}" for key, count in outcome.counts.to_dict().items() if count]
        if details:
            stats += " [" + ", ".join(details) + "]"

        return stats
