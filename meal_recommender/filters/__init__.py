"""
Filtering modules for the recommendation pipeline.
"""
from .base_filter import BaseFilter, FilterOutcome, FilterTraceEntry
from .constraint_filter import ConstraintFilter

__all__ = [
    'BaseFilter',
    'FilterOutcome',
    'FilterTraceEntry',
    'ConstraintFilter',
]
