# meal_recommender/models/response.py
"""
Recommendation response models.

The response shape is a stable contract with callers. to_dict() produces
the camelCase wire form:

{
    "version": "1.0",
    "requestId": "...",
    "filteredOutCounts": {"allergyConflict": 0, ...},
    "recommendations": [
        {"mealId": "...", "score": 0.7312, "reasons": [...],
         "adjustments": {"portionMultiplier": 1.0, "substitutions": [...]}}
    ],
    "fallback": {"invoked": false, "reason": "", "suggestions": []},
    "banditUpdates": {"applied": false, "arms": {...}},
    "audit": {"rulesApplied": [...], "scoringWeights": {...}}
}
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Optional

RESPONSE_VERSION = "1.0"


class RejectionBucket(Enum):
    """Filtered-out counter buckets, valued by their wire key."""
    ALLERGY = "allergyConflict"
    INTOLERANCE = "intoleranceConflict"
    DIETARY_PATTERN = "dietaryPatternConflict"
    BIOMARKER_RULE = "biomarkerRuleConflict"
    MACRO_OVERFLOW = "macroOverflowConflict"
    SLOT_MISMATCH = "slotMismatch"
    DUPLICATE = "duplicates"
    OTHER = "other"


@dataclass
class FilteredOutCounts:
    """Rejection counters, one per bucket."""
    allergy_conflict: int = 0
    intolerance_conflict: int = 0
    dietary_pattern_conflict: int = 0
    biomarker_rule_conflict: int = 0
    macro_overflow_conflict: int = 0
    slot_mismatch: int = 0
    duplicates: int = 0
    other: int = 0

    _ATTRS = {
        RejectionBucket.ALLERGY: "allergy_conflict",
        RejectionBucket.INTOLERANCE: "intolerance_conflict",
        RejectionBucket.DIETARY_PATTERN: "dietary_pattern_conflict",
        RejectionBucket.BIOMARKER_RULE: "biomarker_rule_conflict",
        RejectionBucket.MACRO_OVERFLOW: "macro_overflow_conflict",
        RejectionBucket.SLOT_MISMATCH: "slot_mismatch",
        RejectionBucket.DUPLICATE: "duplicates",
        RejectionBucket.OTHER: "other",
    }

    def increment(self, bucket: RejectionBucket) -> None:
        attr = self._ATTRS[bucket]
        setattr(self, attr, getattr(self, attr) + 1)

    def get(self, bucket: RejectionBucket) -> int:
        return getattr(self, self._ATTRS[bucket])

    @property
    def total(self) -> int:
        return sum(self.get(bucket) for bucket in RejectionBucket)

    def to_dict(self) -> Dict[str, int]:
        return {bucket.value: self.get(bucket) for bucket in RejectionBucket}


@dataclass(frozen=True)
class Substitution:
    """Advisory ingredient swap; never applied to nutrition numbers."""
    from_ingredient: str
    to_ingredient: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.from_ingredient, "to": self.to_ingredient, "reason": self.reason}


@dataclass(frozen=True)
class Adjustments:
    portion_multiplier: float = 1.0
    substitutions: List[Substitution] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "portionMultiplier": self.portion_multiplier,
            "substitutions": [s.to_dict() for s in self.substitutions],
        }


@dataclass(frozen=True)
class MealRecommendation:
    meal_id: str
    score: float
    reasons: List[str]
    adjustments: Adjustments

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mealId": self.meal_id,
            "score": self.score,
            "reasons": list(self.reasons),
            "adjustments": self.adjustments.to_dict(),
        }


@dataclass(frozen=True)
class FallbackBlock:
    invoked: bool = False
    reason: str = ""
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invoked": self.invoked,
            "reason": self.reason,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class BanditUpdates:
    applied: bool = False
    arms: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "applied": self.applied,
            "arms": {key: dict(value) for key, value in self.arms.items()},
        }


@dataclass(frozen=True)
class AuditBlock:
    rules_applied: List[str] = field(default_factory=list)
    scoring_weights: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rulesApplied": list(self.rules_applied),
            "scoringWeights": dict(self.scoring_weights),
        }


@dataclass(frozen=True)
class RecommendationResponse:
    """Full result of one recommend() call."""
    request_id: str
    filtered_out_counts: FilteredOutCounts
    recommendations: List[MealRecommendation]
    fallback: FallbackBlock
    bandit_updates: BanditUpdates
    audit: AuditBlock
    version: str = RESPONSE_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "requestId": self.request_id,
            "filteredOutCounts": self.filtered_out_counts.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "fallback": self.fallback.to_dict(),
            "banditUpdates": self.bandit_updates.to_dict(),
            "audit": self.audit.to_dict(),
        }


@dataclass(frozen=True)
class RecommendationHistoryRecord:
    """
    Append-only record of what was recommended, for later learning.
    """
    user_id: str
    meal_slot: str
    recommended_at: datetime
    request_id: str
    max_results: int
    remaining_budget: Optional[Dict[str, Optional[float]]]
    recommended_meals: List[Dict[str, Any]]
    filtering_stats: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "mealSlot": self.meal_slot,
            "recommendationDate": self.recommended_at.isoformat(),
            "recommendationContext": {
                "requestId": self.request_id,
                "maxResults": self.max_results,
                "dayPlanMacrosRemaining": self.remaining_budget,
            },
            "recommendedMeals": list(self.recommended_meals),
            "filteringStats": dict(self.filtering_stats),
        }
