"""
Tests for portion scaling and substitution suggestions.
"""
import pytest

from meal_recommender.adjusters import PortionAdjuster
from meal_recommender.models import (
    DietaryPattern,
    MacroBudget,
    RecommendationContext,
    Substitution,
    TastePreferences,
    UserProfile,
)


@pytest.fixture
def adjuster():
    return PortionAdjuster()


def _context(budget=None, allow_substitutions=True):
    return RecommendationContext(
        request_id="r", meal_slot="lunch",
        remaining_budget=budget, allow_substitutions=allow_substitutions,
    )


# Portion multiplier
def test_no_budget_keeps_full_portion(adjuster, make_meal):
    """Test meals are not scaled without a budget."""
    assert adjuster.portion_multiplier(make_meal("m1"), _context()) == 1.0


def test_meal_within_budget_keeps_full_portion(adjuster, make_meal):
    """Test meals that fit are not scaled."""
    context = _context(MacroBudget(kcal=600, protein_g=40))
    assert adjuster.portion_multiplier(make_meal("m1", kcal=500, protein=30), context) == 1.0


def test_scales_to_tightest_macro(adjuster, make_meal):
    """Test the smallest budget/serving ratio wins."""
    context = _context(MacroBudget(kcal=450, protein_g=20))
    meal = make_meal("m1", kcal=500, protein=30)
    assert adjuster.portion_multiplier(meal, context) == pytest.approx(20 / 30)


def test_kcal_only_budget(adjuster, make_meal):
    """Test a single-macro budget."""
    context = _context(MacroBudget(kcal=400))
    assert adjuster.portion_multiplier(make_meal("m1", kcal=500), context) == pytest.approx(0.8)


def test_unworkable_portion_left_at_full(adjuster, make_meal):
    """Test ratios under the 0.6 floor are not applied."""
    context = _context(MacroBudget(kcal=200))
    assert adjuster.portion_multiplier(make_meal("m1", kcal=500), context) == 1.0


def test_sodium_does_not_drive_portion(adjuster, make_meal):
    """Test only kcal, protein, carbs and fat set the multiplier."""
    context = _context(MacroBudget(sodium_mg=100))
    assert adjuster.portion_multiplier(make_meal("m1", sodium=400), context) == 1.0


# Substitutions
def test_substitutions_disabled(adjuster, make_meal):
    """Test no substitutions are produced when not allowed."""
    meal = make_meal("m1", sodium=900, ingredients=("pasta", "sea salt"))
    adjustment = adjuster.adjust(meal, UserProfile(user_id="u1"),
                                 _context(allow_substitutions=False))
    assert adjustment.substitutions == []


def test_salt_substitution_for_high_sodium(adjuster, make_meal):
    """Test salty meals get a salt replacement."""
    meal = make_meal("m1", sodium=900, ingredients=("pasta", "sea salt"))
    adjustment = adjuster.adjust(meal, UserProfile(user_id="u1"), _context())
    assert adjustment.substitutions == [
        Substitution("salt", "herbs and spices", "Reduce sodium content"),
    ]


def test_no_salt_substitution_below_threshold(adjuster, make_meal):
    """Test moderate sodium is left alone."""
    meal = make_meal("m1", sodium=700, ingredients=("pasta", "sea salt"))
    assert adjuster.substitutions(meal, UserProfile(user_id="u1")) == []


def test_hint_for_intolerance(adjuster, make_meal):
    """Test catalog hints are surfaced for intolerances."""
    meal = make_meal("m1", ingredients=("butter", "asparagus"),
                     hints={"butter": "olive oil", "asparagus": "green beans"})
    profile = UserProfile(user_id="u1", intolerances=("lactose",))
    assert adjuster.substitutions(meal, profile) == [
        Substitution("butter", "olive oil", "Avoid butter"),
    ]


def test_hint_for_disliked_ingredient(adjuster, make_meal):
    """Test catalog hints are surfaced for disliked ingredients."""
    meal = make_meal("m1", ingredients=("red onion",), hints={"Red Onion": "shallot"})
    profile = UserProfile(
        user_id="u1",
        taste_preferences=TastePreferences(disliked_ingredients=("onion",)),
    )
    assert adjuster.substitutions(meal, profile) == [
        Substitution("Red Onion", "shallot", "Avoid onion"),
    ]


def test_adjust_never_changes_meal(adjuster, make_meal):
    """Test adjustments leave the candidate's nutrition alone."""
    meal = make_meal("m1", kcal=500, sodium=900, ingredients=("salt",))
    adjuster.adjust(meal, UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.KETO,)),
                    _context(MacroBudget(kcal=400)))
    assert meal.serving.kcal == 500
    assert meal.serving.sodium_mg == 900
