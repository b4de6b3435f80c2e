"""
Data models for the meal recommendation engine.
"""
from .bandit import (
    BanditArm, BanditState, PRIOR_FLOOR,
    meal_arm_key, cuisine_arm_key, tag_arm_key,
)
from .profile import UserProfile, Biomarkers, MacroTargets, TastePreferences, DietaryPattern, Goal
from .meal import MealCandidate, Serving
from .context import RecommendationContext, MacroBudget, MealSlot
from .feedback import FeedbackEvent, FeedbackSignal
from .response import (
    RESPONSE_VERSION,
    RejectionBucket,
    FilteredOutCounts,
    Substitution,
    Adjustments,
    MealRecommendation,
    FallbackBlock,
    BanditUpdates,
    AuditBlock,
    RecommendationResponse,
    RecommendationHistoryRecord,
)
from .scoring_context import ScoringContext, ScoringResult, AggregateScore

__all__ = [
    # Bandit models
    'BanditArm',
    'BanditState',
    'PRIOR_FLOOR',
    'meal_arm_key',
    'cuisine_arm_key',
    'tag_arm_key',
    # Profile models
    'UserProfile',
    'Biomarkers',
    'MacroTargets',
    'TastePreferences',
    'DietaryPattern',
    'Goal',
    # Request models
    'MealCandidate',
    'Serving',
    'RecommendationContext',
    'MacroBudget',
    'MealSlot',
    'FeedbackEvent',
    'FeedbackSignal',
    # Response models
    'RESPONSE_VERSION',
    'RejectionBucket',
    'FilteredOutCounts',
    'Substitution',
    'Adjustments',
    'MealRecommendation',
    'FallbackBlock',
    'BanditUpdates',
    'AuditBlock',
    'RecommendationResponse',
    'RecommendationHistoryRecord',
    # Scoring models
    'ScoringContext',
    'ScoringResult',
    'AggregateScore',
]
