# meal_recommender/commands/feedback_command.py
"""
Feedback, arms and trace commands.

Feedback is queued in the session and sent with the next recommend call,
which is when the engine applies it to the bandit arms.
"""
import shlex

from meal_recommender.errors import InvalidRequestError
from meal_recommender.models import FeedbackEvent, FeedbackSignal
from meal_recommender.reports import arms_table, trace_table
from meal_recommender.reports.recommendation_report import console
from .base import Command, register_command

SIGNALS = ", ".join(s.value for s in FeedbackSignal)


@register_command
class FeedbackCommand(Command):
    """Queue a feedback event for the next recommendation."""

    name = ("feedback", "fb")
    help_text = "Queue feedback (feedback <meal_id> <signal> [strength])"

    def execute(self, args: str) -> None:
        """
        Queue one feedback event.

        Examples:
            feedback m1 like
            feedback m7 dislike 0.5
            feedback              (list queued events)
        """
        parts = shlex.split(args)
        if not parts:
            self._show_queue()
            return

        if len(parts) not in (2, 3):
            print(f"Usage: feedback <meal_id> <signal> [strength]  (signals: {SIGNALS})")
            return

        profile = self._require_profile()
        if profile is None:
            return

        meal_id, signal = parts[0], parts[1]
        try:
            strength = float(parts[2]) if len(parts) == 3 else 1.0
            event = FeedbackEvent(
                user_id=profile.user_id,
                meal_id=meal_id,
                signal=FeedbackSignal.parse(signal),
                strength=strength,
            )
        except (InvalidRequestError, ValueError) as e:
            print(f"Error: {e}")
            return

        if self.ctx.catalog.get_meal(meal_id) is None:
            print(f"Warning: meal '{meal_id}' is not in the catalog; it will be skipped")

        self.ctx.pending_feedback.append(event)
        print(f"Queued {event.signal.value} ({event.strength:g}) for {meal_id}. "
              f"{len(self.ctx.pending_feedback)} event(s) will be sent with the next recommend.")

    def _show_queue(self) -> None:
        if not self.ctx.pending_feedback:
            print("No queued feedback.")
            return
        print("Queued feedback:")
        for event in self.ctx.pending_feedback:
            print(f"  {event.meal_id:12} {event.signal.value:10} {event.strength:g}")


@register_command
class ArmsCommand(Command):
    """Show bandit arms for the active user."""

    name = "arms"
    help_text = "Show bandit arms for the active user"

    def execute(self, args: str) -> None:
        profile = self._require_profile()
        if profile is None:
            return

        state = self.ctx.last_state
        if state is None or state.user_id != profile.user_id:
            state = self.ctx.engine.load_bandit_state(profile.user_id)

        if not state.arms:
            print("No bandit arms yet. Give feedback and run recommend.")
            return
        console.print(arms_table(state))


@register_command
class TraceCommand(Command):
    """Show why candidates were rejected in the last run."""

    name = "trace"
    help_text = "Show the rejection trace of the last recommendation"

    def execute(self, args: str) -> None:
        if self.ctx.last_response is None:
            print("No recommendation run yet.")
            return
        trace = self.ctx.last_trace
        if not trace:
            print("No candidates were rejected.")
            return
        console.print(trace_table(trace))
