# meal_recommender/models/profile.py
"""
User health profile model.

Holds everything the engine needs to know about the person it is
recommending for: goals, dietary and cultural restrictions, allergies,
biomarkers, macro targets, taste preferences and bandit arm state.

Free-form strings from upstream (dietary patterns, goals) are parsed into
enums here. Unrecognized values are dropped so that no filtering or
scoring rule fires for them.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple

from .bandit import BanditArm

logger = logging.getLogger(__name__)


class DietaryPattern(Enum):
    """
    Named eating constraints enforced as hard filters.

    Cultural and ethical restrictions share this enum; a restriction listed
    under either field of the profile is enforced the same way.
    """
    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    PESCATARIAN = "pescatarian"
    KETO = "keto"
    LOW_CARB = "low_carb"
    GLUTEN_FREE = "gluten_free"
    DAIRY_FREE = "dairy_free"
    HALAL = "halal"
    KOSHER = "kosher"
    NO_PORK = "no_pork"
    NO_SHELLFISH = "no_shellfish"
    NO_BEEF = "no_beef"
    NO_ALCOHOL = "no_alcohol"
    NO_ANIMAL_PRODUCTS = "no_animal_products"

    @classmethod
    def parse(cls, value: Any) -> Optional['DietaryPattern']:
        """
        Parse a pattern string, returning None for unknown values.

        Matching is case-insensitive and treats '-' and ' ' like '_'
        (so "Gluten-Free" and "gluten_free" are the same pattern).
        """
        if isinstance(value, cls):
            return value
        key = _normalize_key(value)
        for member in cls:
            if member.value == key:
                return member
        return None


class Goal(Enum):
    """Health goals that influence goal-alignment scoring."""
    FAT_LOSS = "fat_loss"
    MUSCLE_GAIN = "muscle_gain"
    METABOLIC_HEALTH = "metabolic_health"
    BP_CONTROL = "bp_control"
    GLUCOSE_CONTROL = "glucose_control"

    @classmethod
    def parse(cls, value: Any) -> Optional['Goal']:
        """Parse a goal string, returning None for unknown values."""
        if isinstance(value, cls):
            return value
        key = _normalize_key(value)
        for member in cls:
            if member.value == key:
                return member
        return None


def _normalize_key(value: Any) -> str:
    return str(value).strip().lower().replace("-", "_").replace(" ", "_")


def _parse_enum_list(enum_cls, values, field_name: str) -> Tuple:
    """Parse a list of strings into unique enum members, keeping order."""
    parsed = []
    for value in values or []:
        member = enum_cls.parse(value)
        if member is None:
            logger.debug("Ignoring unrecognized %s value: %r", field_name, value)
            continue
        if member not in parsed:
            parsed.append(member)
    return tuple(parsed)


def _lower_list(values) -> Tuple[str, ...]:
    return tuple(str(v).strip().lower() for v in (values or []) if str(v).strip())


@dataclass(frozen=True)
class Biomarkers:
    """Latest lab and vitals snapshot. Every field is optional."""
    ldl_mg_dl: Optional[float] = None
    hdl_mg_dl: Optional[float] = None
    tg_mg_dl: Optional[float] = None
    hba1c_pct: Optional[float] = None
    fasting_glucose_mg_dl: Optional[float] = None
    bp_systolic: Optional[float] = None
    bp_diastolic: Optional[float] = None
    ckd_stage: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Biomarkers':
        data = data or {}
        return cls(
            ldl_mg_dl=data.get("ldlMgDl"),
            hdl_mg_dl=data.get("hdlMgDl"),
            tg_mg_dl=data.get("tgMgDl"),
            hba1c_pct=data.get("hba1cPct"),
            fasting_glucose_mg_dl=data.get("fastingGlucoseMgDl"),
            bp_systolic=data.get("bpSystolic"),
            bp_diastolic=data.get("bpDiastolic"),
            ckd_stage=data.get("ckdStage"),
        )


@dataclass(frozen=True)
class MacroTargets:
    """Daily macro targets. Missing values mean "no target"."""
    protein_g: Optional[float] = None
    carbs_g: Optional[float] = None
    fat_g: Optional[float] = None
    fiber_g: Optional[float] = None
    sodium_mg: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['MacroTargets']:
        if not data:
            return None
        return cls(
            protein_g=data.get("proteinG"),
            carbs_g=data.get("carbsG"),
            fat_g=data.get("fatG"),
            fiber_g=data.get("fiberG"),
            sodium_mg=data.get("sodiumMg"),
        )


@dataclass(frozen=True)
class TastePreferences:
    """Liked and disliked tags and ingredients (all lower-cased)."""
    liked_tags: Tuple[str, ...] = ()
    disliked_tags: Tuple[str, ...] = ()
    liked_ingredients: Tuple[str, ...] = ()
    disliked_ingredients: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['TastePreferences']:
        if not data:
            return None
        return cls(
            liked_tags=_lower_list(data.get("likedTags")),
            disliked_tags=_lower_list(data.get("dislikedTags")),
            liked_ingredients=_lower_list(data.get("likedIngredients")),
            disliked_ingredients=_lower_list(data.get("dislikedIngredients")),
        )

    def is_empty(self) -> bool:
        return not (self.liked_tags or self.disliked_tags
                    or self.liked_ingredients or self.disliked_ingredients)


@dataclass(frozen=True)
class UserProfile:
    """
    Health profile of the user being recommended for.

    Attributes:
        user_id: Identity used as the key for bandit and history stores
        goals: Parsed health goals (unknown goals dropped)
        dietary_patterns: Parsed dietary patterns (unknown patterns dropped)
        allergies: Lower-cased allergy categories (e.g., "peanut")
        intolerances: Lower-cased intolerance categories (e.g., "lactose")
        cultural_ethics: Parsed cultural/ethical restrictions
        biomarkers: Biomarker snapshot
        calorie_target_kcal: Daily calorie target, if known
        macro_targets: Daily macro targets, if known
        taste_preferences: Taste preferences, if known
        bandit_arms: Stored arm state keyed by arm key
    """
    user_id: Optional[str] = None
    age: Optional[int] = None
    sex: Optional[str] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    goals: Tuple[Goal, ...] = ()
    dietary_patterns: Tuple[DietaryPattern, ...] = ()
    allergies: Tuple[str, ...] = ()
    intolerances: Tuple[str, ...] = ()
    cultural_ethics: Tuple[DietaryPattern, ...] = ()
    biomarkers: Biomarkers = field(default_factory=Biomarkers)
    calorie_target_kcal: Optional[float] = None
    macro_targets: Optional[MacroTargets] = None
    taste_preferences: Optional[TastePreferences] = None
    bandit_arms: Dict[str, BanditArm] = field(default_factory=dict)

    @property
    def restrictions(self) -> Tuple[DietaryPattern, ...]:
        """Dietary patterns plus cultural restrictions, without repeats."""
        combined = list(self.dietary_patterns)
        for pattern in self.cultural_ethics:
            if pattern not in combined:
                combined.append(pattern)
        return tuple(combined)

    def has_pattern(self, pattern: DietaryPattern) -> bool:
        """Check if a restriction applies via either profile field."""
        return pattern in self.restrictions

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserProfile':
        """
        Build a profile from its wire representation (camelCase keys).

        Args:
            data: Profile dict as produced by the profile service

        Returns:
            UserProfile instance
        """
        bandit_state = data.get("banditState") or {}
        arms = {
            key: BanditArm.from_dict(value)
            for key, value in (bandit_state.get("arms") or {}).items()
        }

        return cls(
            user_id=data.get("userId"),
            age=data.get("age"),
            sex=data.get("sex"),
            height_cm=data.get("heightCm"),
            weight_kg=data.get("weightKg"),
            goals=_parse_enum_list(Goal, data.get("goals"), "goal"),
            dietary_patterns=_parse_enum_list(
                DietaryPattern, data.get("dietaryPattern"), "dietary pattern"
            ),
            allergies=_lower_list(data.get("allergies")),
            intolerances=_lower_list(data.get("intolerances")),
            cultural_ethics=_parse_enum_list(
                DietaryPattern, data.get("culturalEthics"), "cultural restriction"
            ),
            biomarkers=Biomarkers.from_dict(data.get("biomarkers")),
            calorie_target_kcal=data.get("calorieTargetKcal"),
            macro_targets=MacroTargets.from_dict(data.get("macroTargets")),
            taste_preferences=TastePreferences.from_dict(data.get("tastePreferences")),
            bandit_arms=arms,
        )
