# meal_recommender/scorers/__init__.py
"""
Scorer modules for the recommendation engine.

Each scorer evaluates one objective for a candidate and returns a 0-1
normalized score. Registry order is the order sub-scores are computed,
summed and tie-broken when picking reasons.
"""
from .base_scorer import Scorer, NEUTRAL_SCORE
from .goal_alignment_scorer import GoalAlignmentScorer
from .macro_fit_scorer import MacroFitScorer
from .taste_match_scorer import TasteMatchScorer
from .diversity_scorer import DiversityScorer
from .exploration_scorer import ExplorationScorer
from .prep_time_scorer import PrepTimeScorer

# Scorer registry - maps scorer names (weight keys) to classes
SCORER_REGISTRY = {
    "goalAlignment": GoalAlignmentScorer,
    "macroFit": MacroFitScorer,
    "tasteMatch": TasteMatchScorer,
    "diversityBonus": DiversityScorer,
    "explorationBonus": ExplorationScorer,
    "prepTimeBonus": PrepTimeScorer,
}


def create_scorer(scorer_name: str, config, exploration=None):
    """
    Factory function to create scorer instances.

    Args:
        scorer_name: Name of scorer (e.g., "macroFit")
        config: RecommenderConfig instance
        exploration: ExplorationEngine (used by the exploration scorer only)

    Returns:
        Scorer instance

    Raises:
        ValueError: If scorer_name not found in registry
    """
    if scorer_name not in SCORER_REGISTRY:
        raise ValueError(
            f"Unknown scorer: {scorer_name}. "
            f"Available: {list(SCORER_REGISTRY.keys())}"
        )

    scorer_class = SCORER_REGISTRY[scorer_name]
    if scorer_class is ExplorationScorer:
        return scorer_class(config, exploration=exploration)
    return scorer_class(config)


def get_available_scorers():
    """
    Get list of available scorer names.

    Returns:
        List of scorer names in registry order
    """
    return list(SCORER_REGISTRY.keys())


from .multi_objective_scorer import MultiObjectiveScorer  # noqa: E402

__all__ = [
    'Scorer',
    'NEUTRAL_SCORE',
    'GoalAlignmentScorer',
    'MacroFitScorer',
    'TasteMatchScorer',
    'DiversityScorer',
    'ExplorationScorer',
    'PrepTimeScorer',
    'MultiObjectiveScorer',
    'SCORER_REGISTRY',
    'create_scorer',
    'get_available_scorers',
]
