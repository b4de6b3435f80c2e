# meal_recommender/scorers/taste_match_scorer.py
"""
Taste Match Scorer - evaluates meals against liked and disliked tags and
ingredients.

Configuration is fixed:
- base_score: 0.5
- liked tag: +0.1 each, disliked tag: -0.2 each
- liked ingredient: +0.05 each, disliked ingredient: -0.15 each

Ingredient preferences match by substring, the same way the safety
filters match keywords.
"""
from meal_recommender.models.scoring_context import ScoringContext, ScoringResult
from .base_scorer import Scorer, NEUTRAL_SCORE

LIKED_TAG_BONUS = 0.1
DISLIKED_TAG_PENALTY = 0.2
LIKED_INGREDIENT_BONUS = 0.05
DISLIKED_INGREDIENT_PENALTY = 0.15


class TasteMatchScorer(Scorer):
    """Scores a candidate against the profile's taste preferences."""

    label = "Fits taste preferences"

    @property
    def name(self) -> str:
        return "tasteMatch"

    def calculate_score(self, context: ScoringContext) -> ScoringResult:
        prefs = context.profile.taste_preferences
        if prefs is None or prefs.is_empty():
            return self._result(NEUTRAL_SCORE, reason="No taste preferences")

        meal = context.meal
        meal_tags = {t.lower() for t in meal.tags}
        ingredients = meal.ingredients_lower

        liked_tags = [t for t in prefs.liked_tags if t in meal_tags]
        disliked_tags = [t for t in prefs.disliked_tags if t in meal_tags]
        liked_ingredients = [
            i for i in prefs.liked_ingredients if any(i in ing for ing in ingredients)
        ]
        disliked_ingredients = [
            i for i in prefs.disliked_ingredients if any(i in ing for ing in ingredients)
        ]

        raw_score = (
            NEUTRAL_SCORE
            + LIKED_TAG_BONUS * len(liked_tags)
            - DISLIKED_TAG_PENALTY * len(disliked_tags)
            + LIKED_INGREDIENT_BONUS * len(liked_ingredients)
            - DISLIKED_INGREDIENT_PENALTY * len(disliked_ingredients)
        )

        return self._result(
            self._clamp_score(raw_score),
            liked_tags=liked_tags,
            disliked_tags=disliked_tags,
            liked_ingredients=liked_ingredients,
            disliked_ingredients=disliked_ingredients,
            raw_score_before_clamp=raw_score,
        )
