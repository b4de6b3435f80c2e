# meal_recommender/scorers/goal_alignment_scorer.py
"""
Goal Alignment Scorer - rewards meals that serve the user's health goals.

Starts from a neutral 0.5 and adds a bonus for every goal-specific
property the meal has:
- fat_loss: high protein, lower calories, high fiber
- muscle_gain: high protein, adequate calories
- metabolic_health: high fiber, low-GI tag
- bp_control: low sodium
- glucose_control: low carb, high fiber

The total is scaled by the portion multiplier (a reduced portion delivers
less of the benefit) and capped at 1.0.
"""
from typing import List, Tuple

from meal_recommender.models import Goal, MealCandidate
from meal_recommender.models.scoring_context import ScoringContext, ScoringResult
from .base_scorer import Scorer, NEUTRAL_SCORE


def _fiber(meal: MealCandidate) -> float:
    return meal.serving.fiber_g or 0.0


def _goal_bonuses(goal: Goal, meal: MealCandidate) -> List[Tuple[str, float]]:
    """Bonuses a meal earns for one goal, as (reason, amount) pairs."""
    serving = meal.serving
    bonuses = []

    if goal is Goal.FAT_LOSS:
        if serving.protein_g > 30:
            bonuses.append(("high_protein", 0.1))
        if serving.kcal < 500:
            bonuses.append(("lower_calorie", 0.1))
        if _fiber(meal) > 5:
            bonuses.append(("high_fiber", 0.1))
    elif goal is Goal.MUSCLE_GAIN:
        if serving.protein_g > 35:
            bonuses.append(("high_protein", 0.15))
        if serving.kcal > 400:
            bonuses.append(("adequate_calories", 0.1))
    elif goal is Goal.METABOLIC_HEALTH:
        if _fiber(meal) > 7:
            bonuses.append(("high_fiber", 0.15))
        if "low_gi" in meal.tags:
            bonuses.append(("low_gi", 0.1))
    elif goal is Goal.BP_CONTROL:
        if not serving.sodium_mg or serving.sodium_mg < 400:
            bonuses.append(("low_sodium", 0.2))
    elif goal is Goal.GLUCOSE_CONTROL:
        if serving.carbs_g < 30:
            bonuses.append(("low_carb", 0.1))
        if _fiber(meal) > 5:
            bonuses.append(("high_fiber", 0.1))

    return bonuses


class GoalAlignmentScorer(Scorer):
    """Scores how well a candidate serves the profile's health goals."""

    label = "Aligns with health goals"

    @property
    def name(self) -> str:
        return "goalAlignment"

    def calculate_score(self, context: ScoringContext) -> ScoringResult:
        score = NEUTRAL_SCORE
        matched = []

        for goal in context.profile.goals:
            for reason, amount in _goal_bonuses(goal, context.meal):
                score += amount
                matched.append(f"{goal.value}:{reason}")

        final_score = self._clamp_score(score * context.portion_multiplier)
        return self._result(
            final_score,
            matched=matched,
            score_before_portion=score,
            portion_multiplier=context.portion_multiplier,
        )
