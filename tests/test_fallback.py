"""
Tests for fallback suggestions.
"""
import logging

from meal_recommender.config import RecommenderConfig
from meal_recommender.engine import FALLBACK_REASON, FallbackHandler
from meal_recommender.engine.fallback import (
    OMNIVORE_SUGGESTIONS,
    VEGAN_SUGGESTIONS,
    VEGETARIAN_SUGGESTIONS,
)
from meal_recommender.models import DietaryPattern, UserProfile


def test_should_fallback_below_minimum():
    """Test fallback triggers only below three candidates."""
    handler = FallbackHandler()
    assert handler.should_fallback(0)
    assert handler.should_fallback(2)
    assert not handler.should_fallback(3)


def test_minimum_is_configurable():
    """Test the minimum comes from configuration."""
    handler = FallbackHandler(RecommenderConfig(min_candidates=1))
    assert not handler.should_fallback(1)


def test_vegan_takes_precedence():
    """Test vegan profiles get vegan suggestions even if also vegetarian."""
    profile = UserProfile(user_id="u1", dietary_patterns=(
        DietaryPattern.VEGETARIAN, DietaryPattern.VEGAN,
    ))
    assert FallbackHandler().suggestions_for(profile) == VEGAN_SUGGESTIONS


def test_vegetarian_suggestions():
    """Test vegetarian profiles get vegetarian suggestions."""
    profile = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.VEGETARIAN,))
    assert FallbackHandler().suggestions_for(profile) == VEGETARIAN_SUGGESTIONS


def test_omnivore_default():
    """Test profiles without a plant-based pattern get the default list."""
    profile = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.KETO,))
    assert FallbackHandler().suggestions_for(profile) == OMNIVORE_SUGGESTIONS


def test_build_block():
    """Test the fallback block contents."""
    block = FallbackHandler().build(UserProfile(user_id="u1"), 1)
    assert block.invoked
    assert block.reason == FALLBACK_REASON == "Too few meals after filtering"
    assert 1 <= len(block.suggestions) <= 3


# Screening against the profile
def test_fish_allergy_drops_salmon():
    """Test a fish-allergic omnivore is never offered salmon."""
    profile = UserProfile(user_id="u1", allergies=("fish",))
    assert FallbackHandler().suggestions_for(profile) == [
        "Grilled Chicken with Steamed Vegetables",
        "Turkey and Vegetable Wrap",
        "Quinoa Buddha Bowl with Roasted Vegetables",
    ]


def test_pescatarian_gets_no_poultry():
    """Test pescatarians keep fish but lose chicken and turkey."""
    profile = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.PESCATARIAN,))
    assert FallbackHandler().suggestions_for(profile) == [
        "Salmon with Quinoa and Asparagus",
        "Quinoa Buddha Bowl with Roasted Vegetables",
        "Chickpea and Spinach Curry",
    ]


def test_egg_allergic_vegetarian():
    profile = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.VEGETARIAN,),
                          allergies=("egg",))
    suggestions = FallbackHandler().suggestions_for(profile)
    assert "Egg and Avocado Toast" not in suggestions
    assert len(suggestions) == 3


def test_dairy_allergic_vegetarian():
    """Test feta counts as dairy."""
    profile = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.VEGETARIAN,),
                          allergies=("dairy",))
    assert FallbackHandler().suggestions_for(profile) == [
        "Vegetable Stir-fry with Tofu",
        "Egg and Avocado Toast",
        "Quinoa Buddha Bowl with Roasted Vegetables",
    ]


def test_lactose_intolerance_screens_suggestions():
    profile = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.VEGETARIAN,),
                          intolerances=("lactose",))
    assert "Greek Salad with Feta" not in FallbackHandler().suggestions_for(profile)


def test_soy_allergic_vegan_not_duplicated():
    """Test the vegan list is not repeated when it is also the starting list."""
    profile = UserProfile(user_id="u1", dietary_patterns=(DietaryPattern.VEGAN,),
                          allergies=("soy",))
    assert FallbackHandler().suggestions_for(profile) == VEGAN_SUGGESTIONS


def test_nothing_safe_returns_empty(caplog):
    """Test an empty list is returned and logged when every title clashes."""
    profile = UserProfile(user_id="u1", allergies=("with", "and", "oats"))
    with caplog.at_level(logging.WARNING, logger="meal_recommender.engine.fallback"):
        assert FallbackHandler().suggestions_for(profile) == []
    assert "No fallback suggestion is safe" in caplog.text
