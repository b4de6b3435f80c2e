# meal_recommender/filters/constraint_filter.py
"""
Hard constraint filtering for meal candidates.

Removes candidates that are unsafe, non-compliant, duplicated or
mismatched before any scoring happens. Checks run in a fixed order and the
first failing check decides the rejection bucket:

1. duplicate meal id (first occurrence wins)
2. meal slot mismatch
3. allergy (allergen tag or ingredient keyword)
4. intolerance (ingredient keyword)
5. dietary pattern / cultural restriction
6. biomarker rule (blood pressure, LDL, HbA1c)
7. macro overflow (> tolerance x remaining budget)
8. other (structurally unusable nutrition data)
"""
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from meal_recommender.config import RecommenderConfig
from meal_recommender.models import (
    DietaryPattern,
    MealCandidate,
    RecommendationContext,
    RejectionBucket,
    UserProfile,
)
from meal_recommender.utils.keyword_tables import (
    DAIRY_KEYWORDS,
    NON_FISH_MEAT_KEYWORDS,
    PATTERN_KEYWORDS,
    contains_any,
    find_keyword_match,
    get_allergy_keywords,
    get_intolerance_keywords,
)
from .base_filter import BaseFilter, FilterOutcome, FilterTraceEntry

logger = logging.getLogger(__name__)

KETO_MAX_CARBS_G = 20
LOW_CARB_MAX_CARBS_G = 50

# Buckets whose rejections are also written to the audit trail
_AUDITED_BUCKETS = {
    RejectionBucket.ALLERGY: "allergy conflict",
    RejectionBucket.INTOLERANCE: "intolerance conflict",
    RejectionBucket.DIETARY_PATTERN: "dietary pattern conflict",
    RejectionBucket.BIOMARKER_RULE: "biomarker rule conflict",
    RejectionBucket.MACRO_OVERFLOW: "macro overflow",
}

Check = Callable[[MealCandidate, UserProfile, RecommendationContext], Optional[str]]


class ConstraintFilter(BaseFilter):
    """
    Applies every hard constraint to the candidate pool.

    Pure: the inputs are not modified and nothing outside the returned
    FilterOutcome is touched.
    """

    def __init__(self, config: Optional[RecommenderConfig] = None):
        """
        Initialize constraint filter.

        Args:
            config: Engine configuration (thresholds); defaults if None
        """
        self.config = config or RecommenderConfig()
        self._checks: List[Tuple[RejectionBucket, Check]] = [
            (RejectionBucket.SLOT_MISMATCH, self._check_slot),
            (RejectionBucket.ALLERGY, self._check_allergies),
            (RejectionBucket.INTOLERANCE, self._check_intolerances),
            (RejectionBucket.DIETARY_PATTERN, self._check_dietary_patterns),
            (RejectionBucket.BIOMARKER_RULE, self._check_biomarkers),
            (RejectionBucket.MACRO_OVERFLOW, self._check_macro_overflow),
            (RejectionBucket.OTHER, self._check_structure),
        ]

    def filter_candidates(
        self,
        candidates: Sequence[MealCandidate],
        profile: UserProfile,
        context: RecommendationContext,
    ) -> FilterOutcome:
        """
        Run all constraint checks over the candidate pool.

        Args:
            candidates: Candidate pool
            profile: User profile
            context: Request context

        Returns:
            FilterOutcome with survivors in input order
        """
        outcome = FilterOutcome()
        seen = set()

        for meal in candidates:
            if meal.meal_id in seen:
                self._reject(outcome, meal, RejectionBucket.DUPLICATE, "duplicate meal id")
                continue
            seen.add(meal.meal_id)

            for bucket, check in self._checks:
                detail = check(meal, profile, context)
                if detail:
                    self._reject(outcome, meal, bucket, detail)
                    break
            else:
                outcome.passed.append(meal)

        logger.debug(
            "Request %s: %s",
            context.request_id, self.get_filter_stats(len(candidates), outcome),
        )
        return outcome

    def _reject(self, outcome: FilterOutcome, meal: MealCandidate,
                bucket: RejectionBucket, detail: str) -> None:
        outcome.counts.increment(bucket)
        outcome.trace.append(FilterTraceEntry(meal.meal_id, meal.title, bucket, detail))
        if bucket in _AUDITED_BUCKETS:
            outcome.rules_applied.append(f"Filtered {meal.title} - {_AUDITED_BUCKETS[bucket]}")
        logger.debug("Rejected %s (%s): %s", meal.meal_id, bucket.value, detail)

    # =========================================================================
    # Individual checks: return a detail string on failure, None on pass
    # =========================================================================

    def _check_slot(self, meal, profile, context) -> Optional[str]:
        slot = context.meal_slot.value
        if slot not in meal.meal_slots:
            return f"not valid for {slot} (valid: {', '.join(meal.meal_slots) or 'none'})"
        return None

    def _check_allergies(self, meal, profile, context) -> Optional[str]:
        for allergy in profile.allergies:
            if allergy in meal.allergens:
                return f"allergen tag '{allergy}'"
            ingredient, keyword = find_keyword_match(
                meal.ingredients, get_allergy_keywords(allergy)
            )
            if ingredient:
                return f"{allergy}: ingredient '{ingredient}' matches '{keyword}'"
        return None

    def _check_intolerances(self, meal, profile, context) -> Optional[str]:
        for intolerance in profile.intolerances:
            ingredient, keyword = find_keyword_match(
                meal.ingredients, get_intolerance_keywords(intolerance)
            )
            if ingredient:
                return f"{intolerance}: ingredient '{ingredient}' matches '{keyword}'"
        return None

    def _check_dietary_patterns(self, meal, profile, context) -> Optional[str]:
        carbs = meal.serving.carbs_g

        for pattern in profile.restrictions:
            if pattern is DietaryPattern.KETO and carbs > KETO_MAX_CARBS_G:
                return f"keto: {carbs:g}g carbs > {KETO_MAX_CARBS_G}g"
            if pattern is DietaryPattern.LOW_CARB and carbs > LOW_CARB_MAX_CARBS_G:
                return f"low_carb: {carbs:g}g carbs > {LOW_CARB_MAX_CARBS_G}g"

            keywords = PATTERN_KEYWORDS.get(pattern)
            if keywords:
                ingredient, keyword = find_keyword_match(meal.ingredients, keywords)
                if ingredient:
                    return f"{pattern.value}: ingredient '{ingredient}' matches '{keyword}'"

            if pattern is DietaryPattern.KOSHER:
                if (contains_any(meal.ingredients, DAIRY_KEYWORDS)
                        and contains_any(meal.ingredients, NON_FISH_MEAT_KEYWORDS)):
                    return "kosher: dairy combined with meat"

            if pattern is DietaryPattern.NO_SHELLFISH and "shellfish" in meal.allergens:
                return "no_shellfish: allergen tag 'shellfish'"

        return None

    def _check_biomarkers(self, meal, profile, context) -> Optional[str]:
        bio = profile.biomarkers
        limits = self.config.biomarker_thresholds
        serving = meal.serving

        high_bp = (
            (bio.bp_systolic is not None and bio.bp_systolic > limits.bp_systolic)
            or (bio.bp_diastolic is not None and bio.bp_diastolic > limits.bp_diastolic)
        )
        if high_bp and serving.sodium_mg and serving.sodium_mg > limits.max_sodium_mg:
            return f"elevated BP: sodium {serving.sodium_mg:g}mg > {limits.max_sodium_mg:g}mg"

        if bio.ldl_mg_dl is not None and bio.ldl_mg_dl > limits.ldl_mg_dl:
            sat_fat = serving.fat_g * limits.sat_fat_fraction
            if sat_fat > limits.max_sat_fat_g:
                return (f"high LDL: estimated saturated fat {sat_fat:.1f}g "
                        f"> {limits.max_sat_fat_g:g}g")

        if bio.hba1c_pct is not None and bio.hba1c_pct > limits.hba1c_pct:
            if serving.carbs_g > limits.max_carbs_g and not serving.fiber_g:
                return (f"high HbA1c: {serving.carbs_g:g}g carbs > "
                        f"{limits.max_carbs_g:g}g without fiber")

        return None

    def _check_macro_overflow(self, meal, profile, context) -> Optional[str]:
        budget = context.remaining_budget
        if budget is None:
            return None

        tolerance = self.config.overflow_tolerance
        serving = meal.serving
        pairs = [
            ("kcal", serving.kcal, budget.kcal),
            ("protein", serving.protein_g, budget.protein_g),
            ("carbs", serving.carbs_g, budget.carbs_g),
            ("fat", serving.fat_g, budget.fat_g),
            ("sodium", serving.sodium_mg, budget.sodium_mg),
        ]
        for name, value, remaining in pairs:
            if not remaining or value is None:
                continue
            if value > remaining * tolerance:
                return f"{name} {value:g} > {tolerance:g} x remaining {remaining:g}"

        return None

    def _check_structure(self, meal, profile, context) -> Optional[str]:
        if meal.serving.has_negative_values():
            return "negative nutrition values"
        return None
