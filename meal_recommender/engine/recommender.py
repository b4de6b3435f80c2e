# meal_recommender/engine/recommender.py
"""
Recommendation orchestrator.

One call to recommend() walks a fixed sequence of stages:

    start -> feedback applied -> filtered -> (fallback | scored -> ranked)
          -> persisted -> done

Everything up to persistence is a pure function of the inputs plus the
sampler's draws. Persistence writes the bandit deltas and a history record
and never changes the response: store failures are logged and dropped.
"""
import logging
import threading
from concurrent.futures import Executor
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from meal_recommender.adjusters import PortionAdjuster
from meal_recommender.bandit import BetaSampler, ExplorationEngine
from meal_recommender.config import RecommenderConfig
from meal_recommender.data.bandit_store import BanditStore
from meal_recommender.data.history_store import HistoryStore
from meal_recommender.errors import InvalidRequestError
from meal_recommender.filters import ConstraintFilter, FilterTraceEntry
from meal_recommender.models import (
    Adjustments,
    AuditBlock,
    BanditArm,
    BanditState,
    BanditUpdates,
    FallbackBlock,
    FeedbackEvent,
    MealCandidate,
    MealRecommendation,
    RecommendationContext,
    RecommendationHistoryRecord,
    RecommendationResponse,
    ScoringContext,
    UserProfile,
)
from meal_recommender.scorers import MultiObjectiveScorer
from .fallback import FallbackHandler

logger = logging.getLogger(__name__)


class RecommendationRun(NamedTuple):
    """A response together with what produced it."""
    response: RecommendationResponse
    trace: List[FilterTraceEntry]
    bandit_state: BanditState


class RecommendationEngine:
    """
    Explicitly constructed recommendation service.

    Args:
        bandit_store: Where bandit arms are read from and written to
            (None disables bandit persistence)
        history_store: Where recommendation history is appended
            (None disables history)
        config: Engine configuration; defaults if None
        rng: Seed or random.Random for the Thompson sampler
        executor: Runs persistence in the background when given;
            otherwise persistence runs inline after the response is built

    Example:
        >>> engine = RecommendationEngine(rng=42)
        >>> response = engine.recommend(profile, context, candidates)
        >>> response.to_dict()["recommendations"]
    """

    def __init__(
        self,
        bandit_store: Optional[BanditStore] = None,
        history_store: Optional[HistoryStore] = None,
        config: Optional[RecommenderConfig] = None,
        rng=None,
        executor: Optional[Executor] = None,
    ):
        self.config = config or RecommenderConfig()
        self.bandit_store = bandit_store
        self.history_store = history_store
        self.executor = executor

        self.sampler = BetaSampler(rng)
        self.exploration = ExplorationEngine(self.sampler)
        self.constraint_filter = ConstraintFilter(self.config)
        self.adjuster = PortionAdjuster(self.config)
        self.scorer = MultiObjectiveScorer(self.config, self.exploration)
        self.fallback_handler = FallbackHandler(self.config)

        self._user_locks: Dict[str, threading.Lock] = {}
        self._user_locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def recommend(
        self,
        profile,
        context,
        candidates: Sequence,
        feedback: Optional[Iterable] = None,
    ) -> RecommendationResponse:
        """
        Produce ranked recommendations for one meal slot.

        Args:
            profile: UserProfile (or its dict form)
            context: RecommendationContext (or its dict form)
            candidates: MealCandidate objects (or their dict forms)
            feedback: FeedbackEvent objects (or dicts) to learn from first

        Returns:
            RecommendationResponse

        Raises:
            InvalidRequestError: If a required input is missing or malformed
        """
        return self.run(profile, context, candidates, feedback).response

    def run(
        self,
        profile,
        context,
        candidates: Sequence,
        feedback: Optional[Iterable] = None,
    ) -> RecommendationRun:
        """
        Same as recommend(), also returning the rejection trace and the
        bandit state the request ended with. Nothing is kept on the engine.
        """
        profile, context, candidates, events = self._coerce_inputs(
            profile, context, candidates, feedback
        )
        request_id = context.request_id
        logger.debug("[%s] start: %d candidate(s), %d feedback event(s)",
                     request_id, len(candidates), len(events))

        state = self._initial_state(profile)
        state = self.exploration.apply_feedback(state, events, candidates)
        logger.debug("[%s] feedback applied: bandit version %d, %d arm(s) changed",
                     request_id, state.version, len(state.deltas))

        outcome = self.constraint_filter.filter_candidates(candidates, profile, context)
        logger.debug("[%s] filtered: %d passed, %d rejected",
                     request_id, len(outcome.passed), outcome.rejected_count)

        bandit_updates = BanditUpdates(applied=state.changed, arms=state.arms_to_dict())

        if self.fallback_handler.should_fallback(len(outcome.passed)):
            fallback = self.fallback_handler.build(profile, len(outcome.passed))
            recommendations: List[MealRecommendation] = []
            logger.debug("[%s] fallback", request_id)
        else:
            fallback = FallbackBlock()
            scored = self._score_candidates(outcome.passed, profile, context, state)
            logger.debug("[%s] scored: %d candidate(s)", request_id, len(scored))
            recommendations = self._rank(scored, context.max_results)
            logger.debug("[%s] ranked: returning %d", request_id, len(recommendations))

        response = RecommendationResponse(
            request_id=request_id,
            filtered_out_counts=outcome.counts,
            recommendations=recommendations,
            fallback=fallback,
            bandit_updates=bandit_updates,
            audit=AuditBlock(
                rules_applied=list(outcome.rules_applied),
                scoring_weights=self.scorer.weights,
            ),
        )

        logger.info(
            "Request %s (user %s, %s): %d recommendation(s), %d filtered out%s",
            request_id, profile.user_id, context.meal_slot.value,
            len(recommendations), outcome.counts.total,
            ", fallback" if fallback.invoked else "",
        )

        self._schedule_persistence(profile, context, state, response)
        logger.debug("[%s] done", request_id)
        return RecommendationRun(response, list(outcome.trace), state)

    def load_bandit_state(self, user_id: str) -> BanditState:
        """
        Read a user's arms from the bandit store.

        Arms below the Beta(1, 1) prior are lifted to it. A failing store
        yields an empty state rather than an error.

        Args:
            user_id: User whose arms to load

        Returns:
            BanditState (empty when there is no store or it fails)
        """
        if self.bandit_store is None or not user_id:
            return BanditState(user_id=user_id)
        try:
            arms = self.bandit_store.get(user_id)
        except Exception:
            logger.exception("Failed to load bandit state for user %s", user_id)
            return BanditState(user_id=user_id)
        floored = {key: BanditArm(arm.alpha, arm.beta) for key, arm in arms.items()}
        return BanditState(user_id=user_id, arms=floored)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _coerce_inputs(
        self, profile, context, candidates, feedback,
    ) -> Tuple[UserProfile, RecommendationContext, List[MealCandidate], List[FeedbackEvent]]:
        if profile is None:
            raise InvalidRequestError("profile is required")
        if context is None:
            raise InvalidRequestError("context is required")
        if candidates is None:
            raise InvalidRequestError("candidates is required")

        if isinstance(profile, dict):
            profile = UserProfile.from_dict(profile)
        if isinstance(context, dict):
            context = RecommendationContext.from_dict(context)

        meals = [
            MealCandidate.from_dict(c) if isinstance(c, dict) else c
            for c in candidates
        ]
        events = [
            FeedbackEvent.from_dict(e) if isinstance(e, dict) else e
            for e in (feedback or [])
        ]
        return profile, context, meals, events

    def _initial_state(self, profile: UserProfile) -> BanditState:
        """Arms carried on the profile, or the stored arms when it has none."""
        if profile.bandit_arms:
            arms = {key: BanditArm(a.alpha, a.beta) for key, a in profile.bandit_arms.items()}
            return BanditState(user_id=profile.user_id, arms=arms)
        return self.load_bandit_state(profile.user_id)

    def _score_candidates(
        self,
        meals: List[MealCandidate],
        profile: UserProfile,
        context: RecommendationContext,
        state: BanditState,
    ) -> List[MealRecommendation]:
        scored = []
        for meal in meals:
            adjustment = self.adjuster.adjust(meal, profile, context)
            aggregate, reasons = self.scorer.score(ScoringContext(
                meal=meal,
                profile=profile,
                request=context,
                bandit_state=state,
                portion_multiplier=adjustment.portion_multiplier,
            ))
            scored.append(MealRecommendation(
                meal_id=meal.meal_id,
                score=aggregate.final_score,
                reasons=reasons,
                adjustments=Adjustments(
                    portion_multiplier=adjustment.portion_multiplier,
                    substitutions=list(adjustment.substitutions),
                ),
            ))
        return scored

    @staticmethod
    def _rank(scored: List[MealRecommendation], max_results: int) -> List[MealRecommendation]:
        """Highest score first; equal scores keep pool order."""
        return sorted(scored, key=lambda r: r.score, reverse=True)[:max_results]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _schedule_persistence(
        self,
        profile: UserProfile,
        context: RecommendationContext,
        state: BanditState,
        response: RecommendationResponse,
    ) -> None:
        if not profile.user_id:
            logger.debug("[%s] no user id, skipping persistence", context.request_id)
            return
        if self.executor is not None:
            try:
                self.executor.submit(self._persist, profile.user_id, context, state, response)
                return
            except RuntimeError:
                logger.exception("Executor rejected persistence for request %s",
                                 context.request_id)
                return
        self._persist(profile.user_id, context, state, response)

    def _persist(
        self,
        user_id: str,
        context: RecommendationContext,
        state: BanditState,
        response: RecommendationResponse,
    ) -> None:
        if state.changed and self.bandit_store is not None:
            try:
                self._persist_bandit_deltas(user_id, state.deltas)
            except Exception:
                logger.exception("Failed to persist bandit state for user %s", user_id)

        if response.recommendations and self.history_store is not None:
            try:
                self.history_store.append(self._history_record(user_id, context, response))
            except Exception:
                logger.exception("Failed to record history for request %s",
                                 context.request_id)
        logger.debug("[%s] persisted", context.request_id)

    def _persist_bandit_deltas(self, user_id: str,
                               deltas: Dict[str, Tuple[float, float]]) -> None:
        """Read the current arms, add the deltas and write them back."""
        with self._lock_for(user_id):
            current = self.bandit_store.get(user_id)
            for arm_key, (alpha_inc, beta_inc) in deltas.items():
                arm = current.get(arm_key, BanditArm()).reinforced(alpha_inc, beta_inc)
                self.bandit_store.set(user_id, arm_key, arm.alpha, arm.beta)

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._user_locks_guard:
            if user_id not in self._user_locks:
                self._user_locks[user_id] = threading.Lock()
            return self._user_locks[user_id]

    @staticmethod
    def _history_record(
        user_id: str,
        context: RecommendationContext,
        response: RecommendationResponse,
    ) -> RecommendationHistoryRecord:
        meals: List[Dict[str, Any]] = [
            {
                "mealId": r.meal_id,
                "score": r.score,
                "reasons": list(r.reasons),
                "adjustments": r.adjustments.to_dict(),
            }
            for r in response.recommendations
        ]
        budget = context.remaining_budget.to_dict() if context.remaining_budget else None
        return RecommendationHistoryRecord(
            user_id=user_id,
            meal_slot=context.meal_slot.value,
            recommended_at=datetime.now(timezone.utc),
            request_id=context.request_id,
            max_results=context.max_results,
            remaining_budget=budget,
            recommended_meals=meals,
            filtering_stats=response.filtered_out_counts.to_dict(),
        )
