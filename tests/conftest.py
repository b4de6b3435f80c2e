"""
Shared fixtures for recommender tests.
"""
import pytest

from meal_recommender.models import (
    MealCandidate,
    RecommendationContext,
    Serving,
    UserProfile,
)


def build_meal(meal_id, title=None, slots=("lunch", "dinner"), kcal=450, protein=30,
               carbs=40, fat=15, fiber=5, sodium=400, tags=(), cuisine="",
               ingredients=(), allergens=(), prep=20, hints=None):
    """Build a MealCandidate with sensible defaults."""
    return MealCandidate(
        meal_id=meal_id,
        title=title or meal_id,
        meal_slots=tuple(slots),
        serving=Serving(kcal=kcal, protein_g=protein, carbs_g=carbs, fat_g=fat,
                        fiber_g=fiber, sodium_mg=sodium),
        tags=tuple(tags),
        cuisine=cuisine,
        ingredients=tuple(ingredients),
        allergens=tuple(allergens),
        prep_time_min=prep,
        substitution_hints=dict(hints or {}),
    )


@pytest.fixture
def make_meal():
    """Factory for MealCandidate objects."""
    return build_meal


@pytest.fixture
def peanut_stir_fry():
    return build_meal(
        "stir-fry", "Thai Peanut Stir-fry",
        ingredients=("rice noodles", "peanut sauce", "tofu", "bell pepper"),
        allergens=("soy",), tags=("spicy", "stir_fry"), cuisine="thai",
    )


@pytest.fixture
def pork_bbq():
    return build_meal(
        "pork-bbq", "Pork BBQ Sandwich",
        ingredients=("pulled pork", "brioche bun", "bbq sauce"),
        tags=("comfort", "bbq"), cuisine="american",
    )


@pytest.fixture
def shellfish_paella():
    return build_meal(
        "paella", "Shellfish Paella",
        ingredients=("rice", "shrimp", "saffron", "peas"),
        allergens=("shellfish",), tags=("seafood",), cuisine="spanish",
    )


@pytest.fixture
def safe_meals():
    """Three candidates that pass every filter for a plain profile."""
    return [
        build_meal("bowl", "Grilled Chicken Quinoa Bowl",
                   ingredients=("chicken breast", "quinoa", "spinach"),
                   tags=("high_protein", "bowl"), cuisine="mediterranean"),
        build_meal("soup", "Lentil Vegetable Soup",
                   ingredients=("red lentils", "carrot", "celery"),
                   tags=("vegan", "high_fiber"), cuisine="middle_eastern"),
        build_meal("salmon", "Salmon with Roasted Vegetables",
                   ingredients=("salmon fillet", "broccoli", "sweet potato"),
                   tags=("omega3",), cuisine="nordic"),
    ]


@pytest.fixture
def plain_profile():
    return UserProfile(user_id="u1")


@pytest.fixture
def lunch_context():
    return RecommendationContext(request_id="req-1", meal_slot="lunch")
