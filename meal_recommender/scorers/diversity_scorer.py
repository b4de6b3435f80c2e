# meal_recommender/scorers/diversity_scorer.py
"""
Diversity Scorer - rewards variety in proportion to diversity strength.

The bonus is currently diversity_strength * 0.5 for every candidate.
Recent-meal history is not tracked yet, so this is the extension point for
a history-aware variety signal; keep the 0-1 bound when replacing it.
"""
from meal_recommender.models.scoring_context import ScoringContext, ScoringResult
from .base_scorer import Scorer

DIVERSITY_SCALE = 0.5


class DiversityScorer(Scorer):
    """Variety bonus scaled by the request's diversity strength."""

    label = "Adds meal variety"

    @property
    def name(self) -> str:
        return "diversityBonus"

    def calculate_score(self, context: ScoringContext) -> ScoringResult:
        strength = context.request.diversity_strength
        return self._result(
            self._clamp_score(strength * DIVERSITY_SCALE),
            diversity_strength=strength,
        )
