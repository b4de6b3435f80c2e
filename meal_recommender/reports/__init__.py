"""
Report generation modules.
"""
from .recommendation_report import RecommendationReport, arms_table, trace_table

__all__ = [
    'RecommendationReport',
    'arms_table',
    'trace_table',
]
