"""
Utility functions for the recommendation engine.
"""
from .keyword_tables import (
    ALLERGY_KEYWORDS,
    INTOLERANCE_KEYWORDS,
    PATTERN_KEYWORDS,
    get_allergy_keywords,
    get_intolerance_keywords,
    find_keyword_match,
    contains_any,
)

__all__ = [
    'ALLERGY_KEYWORDS',
    'INTOLERANCE_KEYWORDS',
    'PATTERN_KEYWORDS',
    'get_allergy_keywords',
    'get_intolerance_keywords',
    'find_keyword_match',
    'contains_any',
]
