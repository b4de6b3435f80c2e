"""
Meal recommendation engine.

Turns a user's health profile, a pool of candidate meals and feedback
history into a ranked, safety-filtered, explainable set of suggestions.
"""
from .engine import RecommendationEngine
from .errors import RecommenderError, InvalidRequestError, StoreError

__version__ = "1.0.0"

__all__ = [
    'RecommendationEngine',
    'RecommenderError',
    'InvalidRequestError',
    'StoreError',
]
