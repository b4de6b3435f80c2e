"""
Tests for data models.
"""
from datetime import timezone

import pytest

from meal_recommender.errors import InvalidRequestError
from meal_recommender.models import (
    BanditArm,
    BanditState,
    DietaryPattern,
    FeedbackEvent,
    FeedbackSignal,
    FilteredOutCounts,
    Goal,
    MealCandidate,
    MealSlot,
    RecommendationContext,
    RejectionBucket,
    UserProfile,
)


# BanditArm tests
def test_bandit_arm_defaults_to_uniform_prior():
    """Test a new arm is Beta(1, 1)."""
    arm = BanditArm()
    assert arm.alpha == 1.0
    assert arm.beta == 1.0
    assert arm.mean == 0.5


def test_bandit_arm_floors_values():
    """Test alpha and beta below 1 are lifted to 1."""
    arm = BanditArm(alpha=0.2, beta=-3)
    assert arm.alpha == 1.0
    assert arm.beta == 1.0


def test_bandit_arm_reinforced_ignores_negative_increments():
    """Test an arm never loses evidence."""
    arm = BanditArm(3.0, 2.0).reinforced(-1.0, 0.5)
    assert arm.alpha == 3.0
    assert arm.beta == 2.5


def test_bandit_arm_from_dict_missing_keys():
    """Test missing alpha/beta fall back to the prior."""
    arm = BanditArm.from_dict({"alpha": 4})
    assert arm.alpha == 4.0
    assert arm.beta == 1.0


# BanditState tests
def test_bandit_state_apply_increments_bumps_version():
    """Test applying increments returns a new state with deltas."""
    state = BanditState(user_id="u1")
    updated = state.apply_increments({"meal:a": (1.0, 0.0)})

    assert updated is not state
    assert updated.version == 1
    assert updated.get("meal:a").alpha == 2.0
    assert updated.deltas == {"meal:a": (1.0, 0.0)}
    assert state.arms == {}


def test_bandit_state_accumulates_deltas():
    """Test deltas add up across batches."""
    state = BanditState(user_id="u1")
    state = state.apply_increments({"meal:a": (1.0, 0.0)})
    state = state.apply_increments({"meal:a": (0.5, 1.0)})

    assert state.version == 2
    assert state.deltas["meal:a"] == (1.5, 1.0)
    assert state.get("meal:a").alpha == pytest.approx(2.5)
    assert state.get("meal:a").beta == pytest.approx(2.0)


def test_bandit_state_empty_increments_unchanged():
    """Test an empty batch leaves the state alone."""
    state = BanditState(user_id="u1")
    assert state.apply_increments({}) is state
    assert not state.changed


# RecommendationContext tests
def test_context_parses_slot_case_insensitively():
    """Test slot names are normalized."""
    context = RecommendationContext(request_id="r", meal_slot="Dinner")
    assert context.meal_slot is MealSlot.DINNER


def test_context_missing_request_id():
    """Test a blank request id is rejected."""
    with pytest.raises(InvalidRequestError):
        RecommendationContext(request_id="  ", meal_slot="lunch")


def test_context_invalid_request_is_value_error():
    """Test request errors are ValueErrors too."""
    with pytest.raises(ValueError):
        RecommendationContext(request_id="r", meal_slot="brunch")


def test_context_missing_slot():
    """Test a missing slot is rejected."""
    with pytest.raises(InvalidRequestError):
        RecommendationContext(request_id="r", meal_slot=None)


def test_context_max_results_must_be_positive():
    """Test maxResults < 1 is rejected."""
    with pytest.raises(InvalidRequestError):
        RecommendationContext(request_id="r", meal_slot="lunch", max_results=0)


def test_context_clamps_strengths():
    """Test strengths are clamped to [0, 1]."""
    context = RecommendationContext(
        request_id="r", meal_slot="lunch",
        exploration_strength=1.7, diversity_strength=-0.2,
    )
    assert context.exploration_strength == 1.0
    assert context.diversity_strength == 0.0


def test_context_from_dict():
    """Test wire form parsing including the remaining budget."""
    context = RecommendationContext.from_dict({
        "requestId": "r-9",
        "mealSlot": "snack",
        "maxResults": 3,
        "dayPlanMacrosRemaining": {"kcal": 300, "proteinG": 20},
        "allowSubstitutions": True,
    })
    assert context.meal_slot is MealSlot.SNACK
    assert context.max_results == 3
    assert context.remaining_budget.kcal == 300
    assert context.remaining_budget.carbs_g is None
    assert context.allow_substitutions


# FeedbackEvent tests
def test_feedback_strength_must_be_positive():
    """Test zero or negative strength is rejected."""
    with pytest.raises(InvalidRequestError):
        FeedbackEvent(user_id="u1", meal_id="m1", signal="like", strength=0)


def test_feedback_unknown_signal():
    """Test unknown signals are rejected."""
    with pytest.raises(InvalidRequestError):
        FeedbackSignal.parse("meh")


def test_feedback_from_dict_parses_zulu_timestamp():
    """Test ISO timestamps with a Z suffix are accepted."""
    event = FeedbackEvent.from_dict({
        "userId": "u1", "mealId": "m1", "signal": "SAVED",
        "timestamp": "2024-05-01T12:30:00Z",
    })
    assert event.signal is FeedbackSignal.SAVED
    assert event.timestamp.tzinfo is not None
    assert event.timestamp.utcoffset() == timezone.utc.utcoffset(None)


# UserProfile tests
def test_profile_from_dict_ignores_unknown_values():
    """Test unknown goals and patterns are dropped."""
    profile = UserProfile.from_dict({
        "userId": "u1",
        "goals": ["fat_loss", "become_astronaut"],
        "dietaryPattern": ["Gluten-Free", "omnivore"],
        "allergies": ["Peanut "],
    })
    assert profile.goals == (Goal.FAT_LOSS,)
    assert profile.dietary_patterns == (DietaryPattern.GLUTEN_FREE,)
    assert profile.allergies == ("peanut",)


def test_profile_restrictions_merge_cultural_ethics():
    """Test cultural restrictions are enforced alongside patterns."""
    profile = UserProfile.from_dict({
        "userId": "u5",
        "dietaryPattern": ["omnivore", "halal"],
        "culturalEthics": ["kosher", "no_pork", "halal"],
    })
    assert profile.restrictions == (
        DietaryPattern.HALAL, DietaryPattern.KOSHER, DietaryPattern.NO_PORK,
    )
    assert profile.has_pattern(DietaryPattern.NO_PORK)


def test_profile_reads_bandit_arms():
    """Test stored arms are parsed from banditState."""
    profile = UserProfile.from_dict({
        "userId": "u1",
        "banditState": {"arms": {"meal:m1": {"alpha": 3, "beta": 2}}},
    })
    assert profile.bandit_arms["meal:m1"] == BanditArm(3.0, 2.0)


def test_profile_empty_taste_preferences():
    """Test empty taste preferences are treated as absent."""
    profile = UserProfile.from_dict({"userId": "u1", "tastePreferences": {}})
    assert profile.taste_preferences is None


# MealCandidate tests
def test_meal_from_dict_requires_meal_id():
    """Test candidates without an id are malformed."""
    with pytest.raises(InvalidRequestError):
        MealCandidate.from_dict({"serving": {"kcal": 1, "proteinG": 1, "carbsG": 1, "fatG": 1}})


def test_meal_from_dict_requires_serving_fields():
    """Test a serving missing a macro is malformed."""
    with pytest.raises(InvalidRequestError):
        MealCandidate.from_dict({"mealId": "m1", "serving": {"kcal": 100}})


def test_meal_from_dict_unwraps_nested_hints():
    """Test substitution hints nested under 'substitutions' are unwrapped."""
    meal = MealCandidate.from_dict({
        "mealId": "m1",
        "title": "Pasta",
        "mealSlot": ["Lunch"],
        "serving": {"kcal": 500, "proteinG": 20, "carbsG": 70, "fatG": 12},
        "allergens": ["Gluten"],
        "substitutionHints": {"substitutions": {"pasta": "zucchini noodles"}},
    })
    assert meal.meal_slots == ("lunch",)
    assert meal.allergens == ("gluten",)
    assert meal.substitution_hints == {"pasta": "zucchini noodles"}
    assert meal.serving.fiber_g is None


def test_meal_from_dict_single_slot_string():
    """Test a bare slot name is read as one slot, not split into letters."""
    serving = {"kcal": 500, "proteinG": 20, "carbsG": 70, "fatG": 12}
    meal = MealCandidate.from_dict({"mealId": "m1", "mealSlot": "Dinner", "serving": serving})
    assert meal.meal_slots == ("dinner",)


def test_meal_from_dict_null_slot():
    """Test a null slot list gives a candidate with no slots."""
    serving = {"kcal": 500, "proteinG": 20, "carbsG": 70, "fatG": 12}
    meal = MealCandidate.from_dict({"mealId": "m1", "mealSlot": None, "serving": serving})
    assert meal.meal_slots == ()


def test_meal_top_tags_keeps_catalog_order(make_meal):
    """Test only the first three tags feed tag arms."""
    meal = make_meal("m1", tags=("a", "b", "c", "d"))
    assert meal.top_tags() == ("a", "b", "c")


# FilteredOutCounts tests
def test_filtered_out_counts_wire_keys():
    """Test every bucket appears in the wire form."""
    counts = FilteredOutCounts()
    counts.increment(RejectionBucket.ALLERGY)
    counts.increment(RejectionBucket.ALLERGY)
    counts.increment(RejectionBucket.DUPLICATE)

    data = counts.to_dict()
    assert set(data) == {
        "allergyConflict", "intoleranceConflict", "dietaryPatternConflict",
        "biomarkerRuleConflict", "macroOverflowConflict", "slotMismatch",
        "duplicates", "other",
    }
    assert data["allergyConflict"] == 2
    assert data["duplicates"] == 1
    assert counts.total == 3
