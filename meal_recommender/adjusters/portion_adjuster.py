# meal_recommender/adjusters/portion_adjuster.py
"""
Portion scaling and ingredient substitution suggestions.

Scales a surviving candidate's serving down to fit the remaining macro
budget when a workable portion exists, and records advisory substitutions.
Substitutions never change the nutrition numbers used for scoring.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from meal_recommender.config import RecommenderConfig
from meal_recommender.models import (
    MealCandidate,
    RecommendationContext,
    Substitution,
    UserProfile,
)
from meal_recommender.utils.keyword_tables import (
    SALT_KEYWORDS,
    contains_any,
    get_intolerance_keywords,
)

SALT_SUBSTITUTE = "herbs and spices"


@dataclass
class Adjustment:
    """Portion multiplier and substitutions chosen for one candidate."""
    portion_multiplier: float = 1.0
    substitutions: List[Substitution] = field(default_factory=list)


class PortionAdjuster:
    """
    Chooses a portion multiplier and substitution suggestions.

    A multiplier below the configured floor (0.6 by default) is treated as
    an unworkable portion and left at 1.0. The overflow filter already
    rejects anything beyond the overflow tolerance.
    """

    def __init__(self, config: Optional[RecommenderConfig] = None):
        self.config = config or RecommenderConfig()

    def adjust(
        self,
        meal: MealCandidate,
        profile: UserProfile,
        context: RecommendationContext,
    ) -> Adjustment:
        """
        Compute adjustments for one candidate.

        Args:
            meal: Surviving candidate
            profile: User profile (intolerances and dislikes for hints)
            context: Request context (budget, substitution flag)

        Returns:
            Adjustment
        """
        adjustment = Adjustment(portion_multiplier=self.portion_multiplier(meal, context))
        if context.allow_substitutions:
            adjustment.substitutions = self.substitutions(meal, profile)
        return adjustment

    def portion_multiplier(self, meal: MealCandidate, context: RecommendationContext) -> float:
        """
        Smallest budget/serving ratio over kcal, protein, carbs and fat.

        Only macros whose serving exceeds a positive budget contribute.

        Returns:
            Multiplier in [min_portion_multiplier, 1.0]
        """
        budget = context.remaining_budget
        if budget is None:
            return 1.0

        serving = meal.serving
        ratios = []
        for value, remaining in [
            (serving.kcal, budget.kcal),
            (serving.protein_g, budget.protein_g),
            (serving.carbs_g, budget.carbs_g),
            (serving.fat_g, budget.fat_g),
        ]:
            if remaining and value > remaining:
                ratios.append(remaining / value)

        if not ratios:
            return 1.0

        min_ratio = min(ratios)
        if self.config.min_portion_multiplier <= min_ratio < 1.0:
            return min_ratio
        return 1.0

    def substitutions(self, meal: MealCandidate, profile: UserProfile) -> List[Substitution]:
        """
        Suggest ingredient swaps.

        - High-sodium meals with added salt get a salt replacement
        - Catalog substitution hints are surfaced for ingredients the user
          is intolerant to or dislikes
        """
        suggestions: List[Substitution] = []
        sodium = meal.serving.sodium_mg

        if (sodium and sodium > self.config.sodium_substitution_mg
                and contains_any(meal.ingredients, SALT_KEYWORDS)):
            suggestions.append(Substitution("salt", SALT_SUBSTITUTE, "Reduce sodium content"))

        if not meal.substitution_hints:
            return suggestions

        avoid = []
        for intolerance in profile.intolerances:
            avoid.extend(get_intolerance_keywords(intolerance))
        if profile.taste_preferences:
            avoid.extend(profile.taste_preferences.disliked_ingredients)

        for ingredient, alternative in meal.substitution_hints.items():
            lowered = ingredient.lower()
            matched = next((word for word in avoid if word in lowered), None)
            if matched:
                suggestions.append(Substitution(ingredient, alternative, f"Avoid {matched}"))

        return suggestions
