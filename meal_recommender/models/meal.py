# meal_recommender/models/meal.py
"""
Candidate meal model.

A MealCandidate is one entry from the catalog query supplied with each
request. Candidates are immutable for the duration of a request.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

from meal_recommender.errors import InvalidRequestError


@dataclass(frozen=True)
class Serving:
    """Per-serving nutrition. Fiber and sodium are optional."""
    kcal: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: Optional[float] = None
    sodium_mg: Optional[float] = None

    def scaled(self, multiplier: float) -> 'Serving':
        """Return nutrition for a portion multiplier."""
        return Serving(
            kcal=self.kcal * multiplier,
            protein_g=self.protein_g * multiplier,
            carbs_g=self.carbs_g * multiplier,
            fat_g=self.fat_g * multiplier,
            fiber_g=None if self.fiber_g is None else self.fiber_g * multiplier,
            sodium_mg=None if self.sodium_mg is None else self.sodium_mg * multiplier,
        )

    def has_negative_values(self) -> bool:
        values = [self.kcal, self.protein_g, self.carbs_g, self.fat_g,
                  self.fiber_g, self.sodium_mg]
        return any(v is not None and v < 0 for v in values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Serving':
        try:
            return cls(
                kcal=float(data["kcal"]),
                protein_g=float(data["proteinG"]),
                carbs_g=float(data["carbsG"]),
                fat_g=float(data["fatG"]),
                fiber_g=_optional_float(data.get("fiberG")),
                sodium_mg=_optional_float(data.get("sodiumMg")),
            )
        except KeyError as e:
            raise InvalidRequestError(f"Serving missing required field {e}") from e


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


@dataclass(frozen=True)
class MealCandidate:
    """
    A meal from the catalog being considered for recommendation.

    Attributes:
        meal_id: Catalog identifier (dedup key)
        title: Display title
        meal_slots: Slots this meal is valid for (lower-cased)
        serving: Per-serving nutrition
        tags: Descriptive tags; the first three feed tag arms
        cuisine: Cuisine name (feeds the cuisine arm)
        ingredients: Ingredient names used for keyword matching
        allergens: Explicit allergen tags
        prep_time_min: Preparation time in minutes
        substitution_hints: Ingredient -> suggested alternative
    """
    meal_id: str
    title: str
    meal_slots: Tuple[str, ...]
    serving: Serving
    tags: Tuple[str, ...] = ()
    cuisine: str = ""
    ingredients: Tuple[str, ...] = ()
    allergens: Tuple[str, ...] = ()
    prep_time_min: float = 0
    substitution_hints: Dict[str, str] = field(default_factory=dict)

    @property
    def ingredients_lower(self) -> Tuple[str, ...]:
        return tuple(i.lower() for i in self.ingredients)

    def top_tags(self, limit: int = 3) -> Tuple[str, ...]:
        """First tags in catalog order (used for tag arms)."""
        return self.tags[:limit]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MealCandidate':
        """
        Build a candidate from its wire representation (camelCase keys).

        mealSlot may be a list of slot names or a single name.

        Raises:
            InvalidRequestError: If mealId or serving is missing
        """
        meal_id = data.get("mealId")
        if not meal_id:
            raise InvalidRequestError("Meal candidate missing 'mealId'")
        if "serving" not in data:
            raise InvalidRequestError(f"Meal candidate '{meal_id}' missing 'serving'")

        slots = data.get("mealSlot") or []
        if isinstance(slots, str):
            slots = [slots]

        hints = data.get("substitutionHints") or {}
        # Catalog hints sometimes arrive nested under a single key
        if isinstance(hints, dict) and isinstance(hints.get("substitutions"), dict):
            hints = hints["substitutions"]

        return cls(
            meal_id=str(meal_id),
            title=data.get("title", str(meal_id)),
            meal_slots=tuple(str(s).strip().lower() for s in slots),
            serving=Serving.from_dict(data["serving"]),
            tags=tuple(data.get("tags", [])),
            cuisine=data.get("cuisine", "") or "",
            ingredients=tuple(data.get("ingredients", [])),
            allergens=tuple(str(a).lower() for a in data.get("allergens", [])),
            prep_time_min=data.get("prepTimeMin", 0) or 0,
            substitution_hints={str(k): str(v) for k, v in hints.items()},
        )
