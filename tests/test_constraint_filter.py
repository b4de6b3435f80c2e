"""
Tests for hard constraint filtering.
"""
import pytest

from meal_recommender.filters import ConstraintFilter
from meal_recommender.models import (
    Biomarkers,
    DietaryPattern,
    MacroBudget,
    RecommendationContext,
    RejectionBucket,
    UserProfile,
)


@pytest.fixture
def constraint_filter():
    return ConstraintFilter()


def _ids(meals):
    return [m.meal_id for m in meals]


# Allergy safety
def test_peanut_allergy_excludes_stir_fry(constraint_filter, peanut_stir_fry,
                                          safe_meals, lunch_context):
    """Test a peanut allergy removes the peanut stir-fry."""
    profile = UserProfile(user_id="u1", allergies=("peanut",))
    outcome = constraint_filter.filter_candidates(
        [peanut_stir_fry] + safe_meals, profile, lunch_context
    )

    assert "stir-fry" not in _ids(outcome.passed)
    assert outcome.counts.allergy_conflict >= 1
    assert "Filtered Thai Peanut Stir-fry - allergy conflict" in outcome.rules_applied


def test_allergen_tag_alone_excludes(constraint_filter, make_meal, lunch_context):
    """Test an explicit allergen tag rejects even without a keyword hit."""
    meal = make_meal("m1", ingredients=("mystery sauce",), allergens=("sesame",))
    profile = UserProfile(user_id="u1", allergies=("sesame",))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert outcome.passed == []
    assert outcome.counts.allergy_conflict == 1


def test_unknown_allergy_matches_its_own_name(constraint_filter, make_meal, lunch_context):
    """Test allergies without a keyword table match by name."""
    meal = make_meal("m1", ingredients=("dijon mustard", "chicken"))
    profile = UserProfile(user_id="u1", allergies=("mustard",))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert outcome.counts.allergy_conflict == 1


def test_intolerance_keyword(constraint_filter, make_meal, lunch_context):
    """Test lactose intolerance rejects milk."""
    meal = make_meal("m1", ingredients=("rolled oats", "whole milk"))
    profile = UserProfile(user_id="u1", intolerances=("lactose",))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert outcome.counts.intolerance_conflict == 1
    assert outcome.trace[0].bucket is RejectionBucket.INTOLERANCE


# Cultural and dietary restrictions
def test_kosher_no_pork_no_shellfish(constraint_filter, pork_bbq, shellfish_paella,
                                     safe_meals, lunch_context):
    """Test cultural restrictions exclude pork and shellfish dishes."""
    profile = UserProfile.from_dict({
        "userId": "U5",
        "dietaryPattern": ["omnivore"],
        "culturalEthics": ["kosher", "no_pork", "no_shellfish"],
    })
    outcome = constraint_filter.filter_candidates(
        [pork_bbq, shellfish_paella] + safe_meals, profile, lunch_context
    )

    assert "pork-bbq" not in _ids(outcome.passed)
    assert "paella" not in _ids(outcome.passed)
    assert outcome.counts.dietary_pattern_conflict == 2
    assert _ids(outcome.passed) == ["bowl", "soup", "salmon"]


def test_no_shellfish_uses_allergen_tag(constraint_filter, make_meal, lunch_context):
    """Test no_shellfish also honors the shellfish allergen tag."""
    meal = make_meal("m1", ingredients=("seafood stock",), allergens=("shellfish",))
    profile = UserProfile(user_id="u1", cultural_ethics=(DietaryPattern.NO_SHELLFISH,))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert outcome.counts.dietary_pattern_conflict == 1


def test_kosher_rejects_dairy_with_meat(constraint_filter, make_meal, lunch_context):
    """Test kosher rejects meat and dairy in one meal."""
    meal = make_meal("m1", ingredients=("beef patty", "cheddar cheese", "bun"))
    profile = UserProfile(user_id="u1", cultural_ethics=(DietaryPattern.KOSHER,))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert outcome.counts.dietary_pattern_conflict == 1
    assert "dairy combined with meat" in outcome.trace[0].detail


@pytest.mark.parametrize("pattern, ingredients, rejected", [
    (DietaryPattern.VEGAN, ("oats", "honey"), True),
    (DietaryPattern.VEGAN, ("oats", "banana"), False),
    (DietaryPattern.VEGETARIAN, ("chicken breast", "rice"), True),
    (DietaryPattern.VEGETARIAN, ("egg", "spinach"), False),
    (DietaryPattern.PESCATARIAN, ("salmon fillet", "rice"), False),
    (DietaryPattern.PESCATARIAN, ("turkey breast", "rice"), True),
    (DietaryPattern.GLUTEN_FREE, ("whole wheat tortilla",), True),
    (DietaryPattern.HALAL, ("chicken", "white wine"), True),
])
def test_dietary_pattern_keywords(constraint_filter, make_meal, lunch_context,
                                  pattern, ingredients, rejected):
    """Test keyword-driven dietary patterns."""
    meal = make_meal("m1", ingredients=ingredients)
    profile = UserProfile(user_id="u1", dietary_patterns=(pattern,))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert (outcome.counts.dietary_pattern_conflict == 1) is rejected


def test_keto_and_low_carb_limits(constraint_filter, make_meal, lunch_context):
    """Test carb ceilings for keto (20g) and low carb (50g)."""
    meals = [make_meal("c20", carbs=20), make_meal("c25", carbs=25), make_meal("c55", carbs=55)]

    keto = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.KETO,))
    assert _ids(constraint_filter.filter_candidates(meals, keto, lunch_context).passed) == ["c20"]

    low_carb = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.LOW_CARB,))
    passed = constraint_filter.filter_candidates(meals, low_carb, lunch_context).passed
    assert _ids(passed) == ["c20", "c25"]


# Biomarker rules
def test_high_blood_pressure_rejects_salty_meals(constraint_filter, make_meal, lunch_context):
    """Test elevated BP rejects sodium above 600mg."""
    meals = [make_meal("salty", sodium=700), make_meal("ok", sodium=600)]
    profile = UserProfile(user_id="u1", biomarkers=Biomarkers(bp_systolic=150))
    outcome = constraint_filter.filter_candidates(meals, profile, lunch_context)

    assert _ids(outcome.passed) == ["ok"]
    assert outcome.counts.biomarker_rule_conflict == 1


def test_high_ldl_rejects_saturated_fat(constraint_filter, make_meal, lunch_context):
    """Test high LDL rejects meals with more than 7g estimated saturated fat."""
    meals = [make_meal("fatty", fat=30), make_meal("lean", fat=20)]
    profile = UserProfile(user_id="u1", biomarkers=Biomarkers(ldl_mg_dl=170))
    outcome = constraint_filter.filter_candidates(meals, profile, lunch_context)

    assert _ids(outcome.passed) == ["lean"]


def test_high_hba1c_requires_fiber_for_high_carb(constraint_filter, make_meal, lunch_context):
    """Test high HbA1c rejects high-carb meals lacking fiber."""
    meals = [
        make_meal("no-fiber", carbs=60, fiber=None),
        make_meal("zero-fiber", carbs=60, fiber=0),
        make_meal("fiber", carbs=60, fiber=5),
        make_meal("low-carb", carbs=30, fiber=None),
    ]
    profile = UserProfile(user_id="u1", biomarkers=Biomarkers(hba1c_pct=7.0))
    outcome = constraint_filter.filter_candidates(meals, profile, lunch_context)

    assert _ids(outcome.passed) == ["fiber", "low-carb"]
    assert outcome.counts.biomarker_rule_conflict == 2


# Macro overflow
def test_macro_overflow_uses_tolerance(constraint_filter, make_meal):
    """Test meals beyond 120% of the remaining budget are rejected."""
    context = RecommendationContext(
        request_id="r", meal_slot="lunch", remaining_budget=MacroBudget(kcal=300),
    )
    meals = [make_meal("over", kcal=400), make_meal("within", kcal=350)]
    outcome = constraint_filter.filter_candidates(meals, UserProfile(user_id="u1"), context)

    assert _ids(outcome.passed) == ["within"]
    assert outcome.counts.macro_overflow_conflict == 1


def test_zero_budget_means_no_budget(constraint_filter, make_meal):
    """Test a zero budget value is ignored."""
    context = RecommendationContext(
        request_id="r", meal_slot="lunch", remaining_budget=MacroBudget(kcal=0),
    )
    outcome = constraint_filter.filter_candidates(
        [make_meal("m1", kcal=900)], UserProfile(user_id="u1"), context
    )
    assert len(outcome.passed) == 1


# Ordering, duplicates, slots
def test_slot_mismatch_checked_before_allergy(constraint_filter, make_meal, lunch_context):
    """Test the first failing check decides the bucket."""
    meal = make_meal("m1", slots=("breakfast",), ingredients=("peanut butter",))
    profile = UserProfile(user_id="u1", allergies=("peanut",))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert outcome.counts.slot_mismatch == 1
    assert outcome.counts.allergy_conflict == 0
    assert outcome.rules_applied == []


def test_allergy_checked_before_intolerance(constraint_filter, make_meal, lunch_context):
    """Test a meal failing two checks is counted once."""
    meal = make_meal("m1", ingredients=("cheese",))
    profile = UserProfile(user_id="u1", allergies=("dairy",), intolerances=("lactose",))
    outcome = constraint_filter.filter_candidates([meal], profile, lunch_context)

    assert outcome.counts.allergy_conflict == 1
    assert outcome.counts.total == 1


def test_duplicates_keep_first_occurrence(constraint_filter, make_meal, lunch_context):
    """Test repeated meal ids are counted as duplicates."""
    first = make_meal("m1", title="First")
    second = make_meal("m1", title="Second")
    outcome = constraint_filter.filter_candidates(
        [first, second], UserProfile(user_id="u1"), lunch_context
    )

    assert [m.title for m in outcome.passed] == ["First"]
    assert outcome.counts.duplicates == 1


def test_negative_nutrition_goes_to_other(constraint_filter, make_meal, lunch_context):
    """Test structurally unusable nutrition is counted as other."""
    outcome = constraint_filter.filter_candidates(
        [make_meal("bad", kcal=-10)], UserProfile(user_id="u1"), lunch_context
    )
    assert outcome.counts.other == 1


def test_filter_does_not_modify_input(constraint_filter, peanut_stir_fry,
                                      safe_meals, lunch_context):
    """Test the candidate list is left untouched."""
    candidates = [peanut_stir_fry] + safe_meals
    profile = UserProfile(user_id="u1", allergies=("peanut",))
    constraint_filter.filter_candidates(candidates, profile, lunch_context)
    assert len(candidates) == 4


def test_filter_stats_message(constraint_filter, peanut_stir_fry, safe_meals, lunch_context):
    """Test human-readable filter statistics."""
    profile = UserProfile(user_id="u1", allergies=("peanut",))
    candidates = [peanut_stir_fry] + safe_meals
    outcome = constraint_filter.filter_candidates(candidates, profile, lunch_context)

    stats = constraint_filter.get_filter_stats(len(candidates), outcome)
    assert stats == "Filtered 1/4 candidates (25.0% rejected) [allergyConflict: 1]"
