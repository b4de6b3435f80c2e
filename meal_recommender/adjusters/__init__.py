"""
Portion and substitution adjustment for surviving candidates.
"""
from .portion_adjuster import PortionAdjuster, Adjustment

__all__ = [
    'PortionAdjuster',
    'Adjustment',
]
