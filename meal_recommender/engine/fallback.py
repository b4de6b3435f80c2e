# meal_recommender/engine/fallback.py
"""
Fallback suggestions for when filtering leaves too few candidates.

The suggestions are generic meal ideas, screened by title against the same
keyword tables the constraint filter uses. They are not catalog entries and
carry no scores.
"""
import logging
from typing import List, Optional

from meal_recommender.config import RecommenderConfig
from meal_recommender.models import DietaryPattern, FallbackBlock, UserProfile
from meal_recommender.utils.keyword_tables import (
    PATTERN_KEYWORDS,
    contains_any,
    get_allergy_keywords,
    get_intolerance_keywords,
)

logger = logging.getLogger(__name__)

FALLBACK_REASON = "Too few meals after filtering"
MAX_SUGGESTIONS = 3

VEGAN_SUGGESTIONS = [
    "Quinoa Buddha Bowl with Roasted Vegetables",
    "Chickpea and Spinach Curry",
    "Overnight Oats with Berries",
]

VEGETARIAN_SUGGESTIONS = [
    "Greek Salad with Feta",
    "Vegetable Stir-fry with Tofu",
    "Egg and Avocado Toast",
]

OMNIVORE_SUGGESTIONS = [
    "Grilled Chicken with Steamed Vegetables",
    "Salmon with Quinoa and Asparagus",
    "Turkey and Vegetable Wrap",
]


class FallbackHandler:
    """Decides when to fall back and what to suggest instead."""

    def __init__(self, config: Optional[RecommenderConfig] = None):
        self.config = config or RecommenderConfig()

    def should_fallback(self, passed_count: int) -> bool:
        return passed_count < self.config.min_candidates

    def base_suggestions(self, profile: UserProfile) -> List[str]:
        """
        Pick the starting suggestion list for a profile.

        Vegan takes precedence over vegetarian, which takes precedence over
        the omnivore default. Cultural restrictions that exclude all animal
        products count as vegan.
        """
        if (profile.has_pattern(DietaryPattern.VEGAN)
                or profile.has_pattern(DietaryPattern.NO_ANIMAL_PRODUCTS)):
            return list(VEGAN_SUGGESTIONS)
        if profile.has_pattern(DietaryPattern.VEGETARIAN):
            return list(VEGETARIAN_SUGGESTIONS)
        return list(OMNIVORE_SUGGESTIONS)

    def suggestions_for(self, profile: UserProfile) -> List[str]:
        """
        Up to three suggestions that clash with none of the profile's
        allergies, intolerances or restrictions.

        Titles rejected from the starting list are replaced from the vegan
        list.
        """
        keywords = []
        for allergy in profile.allergies:
            keywords.extend(get_allergy_keywords(allergy))
        for intolerance in profile.intolerances:
            keywords.extend(get_intolerance_keywords(intolerance))
        for pattern in profile.restrictions:
            keywords.extend(PATTERN_KEYWORDS.get(pattern, []))

        suggestions: List[str] = []
        for title in self.base_suggestions(profile) + VEGAN_SUGGESTIONS:
            if title in suggestions or contains_any([title], keywords):
                continue
            suggestions.append(title)
            if len(suggestions) == MAX_SUGGESTIONS:
                break

        if not suggestions:
            logger.warning("No fallback suggestion is safe for user %s", profile.user_id)
        return suggestions

    def build(self, profile: UserProfile, passed_count: int) -> FallbackBlock:
        """
        Build the fallback block for a request that ran out of candidates.

        Args:
            profile: User profile
            passed_count: Number of candidates that survived filtering

        Returns:
            FallbackBlock with invoked=True
        """
        suggestions = self.suggestions_for(profile)
        logger.warning(
            "Fallback invoked for user %s: %d candidate(s) after filtering (minimum %d)",
            profile.user_id, passed_count, self.config.min_candidates,
        )
        return FallbackBlock(invoked=True, reason=FALLBACK_REASON, suggestions=suggestions)
