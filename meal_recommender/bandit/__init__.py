"""
Thompson Sampling exploration for the recommendation engine.
"""
from .sampler import BetaSampler
from .exploration import (
    ExplorationEngine,
    candidate_arms,
    SIGNAL_INCREMENTS,
    MEAL_ARM_WEIGHT,
    CUISINE_ARM_WEIGHT,
    TAG_ARM_WEIGHT,
)

__all__ = [
    'BetaSampler',
    'ExplorationEngine',
    'candidate_arms',
    'SIGNAL_INCREMENTS',
    'MEAL_ARM_WEIGHT',
    'CUISINE_ARM_WEIGHT',
    'TAG_ARM_WEIGHT',
]
