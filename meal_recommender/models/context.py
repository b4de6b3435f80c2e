# meal_recommender/models/context.py
"""
Request context for a single recommendation call.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional

from meal_recommender.errors import InvalidRequestError


class MealSlot(Enum):
    """Meal slot being recommended for."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @classmethod
    def parse(cls, value: Any) -> 'MealSlot':
        """
        Parse a slot name.

        Raises:
            InvalidRequestError: If value is missing or not a known slot
        """
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            raise InvalidRequestError("Request context missing 'mealSlot'")
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise InvalidRequestError(
            f"Unknown meal slot: {value!r}. "
            f"Valid: {[m.value for m in cls]}"
        )


@dataclass(frozen=True)
class MacroBudget:
    """
    Remaining macro budget for the slot.

    A missing or zero value means "no budget for this macro".
    """
    kcal: Optional[float] = None
    protein_g: Optional[float] = None
    carbs_g: Optional[float] = None
    fat_g: Optional[float] = None
    sodium_mg: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['MacroBudget']:
        if not data:
            return None
        return cls(
            kcal=data.get("kcal"),
            protein_g=data.get("proteinG"),
            carbs_g=data.get("carbsG"),
            fat_g=data.get("fatG"),
            sodium_mg=data.get("sodiumMg"),
        )

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "kcal": self.kcal,
            "proteinG": self.protein_g,
            "carbsG": self.carbs_g,
            "fatG": self.fat_g,
            "sodiumMg": self.sodium_mg,
        }


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class RecommendationContext:
    """
    Per-request settings.

    Attributes:
        request_id: Caller-supplied id echoed in the response
        meal_slot: Slot being recommended for
        timezone: IANA timezone of the user (informational)
        remaining_budget: Remaining macros for the slot, if known
        max_results: Maximum recommendations returned
        diversity_strength: 0-1, scales the diversity bonus
        exploration_strength: 0-1, scales the Thompson Sampling bonus
        allow_substitutions: Whether substitution suggestions are produced
    """
    request_id: str
    meal_slot: MealSlot
    timezone: str = "UTC"
    remaining_budget: Optional[MacroBudget] = None
    max_results: int = 5
    diversity_strength: float = 0.0
    exploration_strength: float = 0.0
    allow_substitutions: bool = False

    def __post_init__(self):
        if not self.request_id or not str(self.request_id).strip():
            raise InvalidRequestError("Request context missing 'requestId'")
        object.__setattr__(self, "meal_slot", MealSlot.parse(self.meal_slot))
        if int(self.max_results) < 1:
            raise InvalidRequestError(f"maxResults must be >= 1, got {self.max_results}")
        object.__setattr__(self, "max_results", int(self.max_results))
        object.__setattr__(self, "diversity_strength", _clamp_unit(self.diversity_strength))
        object.__setattr__(self, "exploration_strength", _clamp_unit(self.exploration_strength))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RecommendationContext':
        return cls(
            request_id=data.get("requestId"),
            meal_slot=data.get("mealSlot"),
            timezone=data.get("timezone", "UTC"),
            remaining_budget=MacroBudget.from_dict(data.get("dayPlanMacrosRemaining")),
            max_results=data.get("maxResults", 5),
            diversity_strength=data.get("diversityStrength", 0.0),
            exploration_strength=data.get("explorationStrength", 0.0),
            allow_substitutions=bool(data.get("allowSubstitutions", False)),
        )
