"""
Recommendation orchestration and fallback handling.
"""
from .fallback import FallbackHandler, FALLBACK_REASON
from .recommender import RecommendationEngine, RecommendationRun

__all__ = [
    'RecommendationEngine',
    'RecommendationRun',
    'FallbackHandler',
    'FALLBACK_REASON',
]
