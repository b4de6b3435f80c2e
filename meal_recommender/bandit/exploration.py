# meal_recommender/bandit/exploration.py
"""
Hierarchical Thompson Sampling over meal, cuisine and tag arms.

Scoring draws one Beta sample per arm a candidate touches and returns the
weighted average scaled by the request's exploration strength. Feedback
events update the same arms before scoring.

Sampling always happens, even when the exploration strength is 0. The
product is then exactly 0.0, which keeps final scores identical across
calls while the sampler still advances the same way it does in
production.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from meal_recommender.models import (
    BanditState,
    FeedbackEvent,
    FeedbackSignal,
    MealCandidate,
    meal_arm_key,
    cuisine_arm_key,
    tag_arm_key,
)
from .sampler import BetaSampler

logger = logging.getLogger(__name__)

# Sample weights per arm granularity
MEAL_ARM_WEIGHT = 2.0
CUISINE_ARM_WEIGHT = 1.0
TAG_ARM_WEIGHT = 0.5

# Feedback increment scale per arm granularity
MEAL_UPDATE_SCALE = 1.0
CUISINE_UPDATE_SCALE = 0.5
TAG_UPDATE_SCALE = 0.3

TAG_ARM_LIMIT = 3

# (alpha increment, beta increment) per unit of event strength
SIGNAL_INCREMENTS: Dict[FeedbackSignal, Tuple[float, float]] = {
    FeedbackSignal.LIKE: (1.0, 0.0),
    FeedbackSignal.COMPLETED: (1.0, 0.0),
    FeedbackSignal.DISLIKE: (0.0, 1.0),
    FeedbackSignal.SAVED: (0.7, 0.0),
}


def candidate_arms(meal: MealCandidate) -> List[Tuple[str, float]]:
    """
    List the arms a candidate touches with their sample weights.

    Order is meal, cuisine, then up to three tags. Meals without a cuisine
    have no cuisine arm.
    """
    arms = [(meal_arm_key(meal.meal_id), MEAL_ARM_WEIGHT)]
    if meal.cuisine:
        arms.append((cuisine_arm_key(meal.cuisine), CUISINE_ARM_WEIGHT))
    for tag in meal.top_tags(TAG_ARM_LIMIT):
        arms.append((tag_arm_key(tag), TAG_ARM_WEIGHT))
    return arms


class ExplorationEngine:
    """
    Thompson Sampling exploration bonus and bandit feedback updates.

    Args:
        sampler: BetaSampler used for every draw
    """

    def __init__(self, sampler: Optional[BetaSampler] = None):
        self.sampler = sampler or BetaSampler()

    def exploration_bonus(
        self,
        meal: MealCandidate,
        state: BanditState,
        exploration_strength: float,
    ) -> Tuple[float, Dict[str, float]]:
        """
        Compute the exploration bonus for one candidate.

        Args:
            meal: Candidate being scored
            state: Bandit state after feedback was applied
            exploration_strength: Request exploration strength (0-1)

        Returns:
            Tuple of (bonus, samples by arm key)
        """
        total_sample = 0.0
        total_weight = 0.0
        samples: Dict[str, float] = {}

        for arm_key, weight in candidate_arms(meal):
            arm = state.get(arm_key)
            sample = self.sampler.sample_beta(arm.alpha, arm.beta)
            samples[arm_key] = sample
            total_sample += sample * weight
            total_weight += weight

        avg_sample = total_sample / total_weight if total_weight > 0 else 0.5
        return avg_sample * exploration_strength, samples

    def feedback_increments(
        self,
        event: FeedbackEvent,
        meal: MealCandidate,
    ) -> Dict[str, Tuple[float, float]]:
        """
        Arm increments produced by a single feedback event.

        Returns:
            Arm key -> (alpha increment, beta increment)
        """
        unit_alpha, unit_beta = SIGNAL_INCREMENTS[event.signal]
        alpha_inc = unit_alpha * event.strength
        beta_inc = unit_beta * event.strength

        increments: Dict[str, Tuple[float, float]] = {
            meal_arm_key(meal.meal_id): (alpha_inc * MEAL_UPDATE_SCALE, beta_inc * MEAL_UPDATE_SCALE),
        }
        if meal.cuisine:
            increments[cuisine_arm_key(meal.cuisine)] = (
                alpha_inc * CUISINE_UPDATE_SCALE, beta_inc * CUISINE_UPDATE_SCALE
            )
        for tag in meal.top_tags(TAG_ARM_LIMIT):
            key = tag_arm_key(tag)
            prev_a, prev_b = increments.get(key, (0.0, 0.0))
            increments[key] = (
                prev_a + alpha_inc * TAG_UPDATE_SCALE, prev_b + beta_inc * TAG_UPDATE_SCALE
            )
        return increments

    def apply_feedback(
        self,
        state: BanditState,
        events: Iterable[FeedbackEvent],
        candidates: Iterable[MealCandidate],
    ) -> BanditState:
        """
        Apply feedback events to the bandit state.

        Events are applied in order. An event whose meal is not in the
        candidate pool cannot be mapped to cuisine or tag arms and is
        skipped.

        Args:
            state: State loaded at request start
            events: Feedback events
            candidates: Candidate pool for this request

        Returns:
            New BanditState (unchanged if nothing applied)
        """
        by_id: Dict[str, MealCandidate] = {}
        for meal in candidates:
            by_id.setdefault(meal.meal_id, meal)

        for event in events:
            meal = by_id.get(event.meal_id)
            if meal is None:
                logger.warning(
                    "Skipping feedback for meal %s: not in candidate pool", event.meal_id
                )
                continue
            state = state.apply_increments(self.feedback_increments(event, meal))
            logger.debug(
                "Applied %s feedback (strength %.2f) to meal %s",
                event.signal.value, event.strength, event.meal_id,
            )

        return state
