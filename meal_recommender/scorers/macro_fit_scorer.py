# meal_recommender/scorers/macro_fit_scorer.py
"""
Macro Fit Scorer - how close the portioned meal lands to the slot target.

The slot target for a macro is the daily target times the slot fraction
(0.28 for breakfast, lunch and dinner, 0.15 for a snack). The score is
1 minus the average relative error over protein, carbs and fat, floored
at 0. Profiles without macro targets score a neutral 0.5.
"""
from meal_recommender.models.scoring_context import ScoringContext, ScoringResult
from .base_scorer import Scorer, NEUTRAL_SCORE


class MacroFitScorer(Scorer):
    """Scores closeness to per-slot macro targets."""

    label = "Matches macro targets"

    @property
    def name(self) -> str:
        return "macroFit"

    def calculate_score(self, context: ScoringContext) -> ScoringResult:
        targets = context.profile.macro_targets
        if targets is None:
            return self._result(NEUTRAL_SCORE, reason="No macro targets")

        fraction = self.config.slot_fraction(context.request.meal_slot.value)
        serving = context.meal.serving.scaled(context.portion_multiplier)

        errors = {}
        for macro, daily, actual in [
            ("protein", targets.protein_g, serving.protein_g),
            ("carbs", targets.carbs_g, serving.carbs_g),
            ("fat", targets.fat_g, serving.fat_g),
        ]:
            if not daily or daily <= 0:
                continue
            slot_target = daily * fraction
            errors[macro] = abs(actual - slot_target) / slot_target

        if not errors:
            return self._result(NEUTRAL_SCORE, reason="No usable macro targets")

        avg_error = sum(errors.values()) / len(errors)
        return self._result(
            max(0.0, 1.0 - avg_error),
            slot_fraction=fraction,
            relative_errors=errors,
            average_error=avg_error,
        )
