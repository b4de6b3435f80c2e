# meal_recommender/commands/recommend_command.py
"""
Recommend command: run the engine for the active user and a meal slot.

Queued feedback (see the feedback command) is sent with the request and
cleared afterwards.
"""
import shlex
from typing import Any, Dict

from meal_recommender.errors import InvalidRequestError
from meal_recommender.models import MacroBudget, RecommendationContext
from meal_recommender.reports import RecommendationReport
from .base import Command, register_command

# --budget keys -> MacroBudget wire keys
BUDGET_KEYS = {
    "kcal": "kcal",
    "protein": "proteinG",
    "carbs": "carbsG",
    "fat": "fatG",
    "sodium": "sodiumMg",
}

USAGE = ("Usage: recommend <slot> [--max N] [--explore X] [--diversity X] "
         "[--seed N] [--no-subs] [--budget kcal=..,protein=..]")


def parse_budget(text: str) -> MacroBudget:
    """
    Parse a --budget value.

    Examples:
        >>> parse_budget("kcal=600,protein=40").kcal
        600.0

    Raises:
        ValueError: On unknown keys or non-numeric values
    """
    values: Dict[str, Any] = {}
    for pair in text.split(","):
        if not pair.strip():
            continue
        if "=" not in pair:
            raise ValueError(f"Budget entry '{pair}' must be key=value")
        key, value = (p.strip().lower() for p in pair.split("=", 1))
        if key not in BUDGET_KEYS:
            raise ValueError(f"Unknown budget key '{key}'. Use: {', '.join(BUDGET_KEYS)}")
        values[BUDGET_KEYS[key]] = float(value)
    return MacroBudget.from_dict(values)


def parse_recommend_args(args: str) -> Dict[str, Any]:
    """
    Parse recommend arguments into request options.

    Returns:
        Dict with slot, max_results, exploration, diversity, seed,
        allow_substitutions and budget

    Raises:
        ValueError: On malformed flags
    """
    parts = shlex.split(args)
    options: Dict[str, Any] = {
        "slot": None,
        "max_results": 5,
        "exploration": 0.0,
        "diversity": 0.0,
        "seed": None,
        "allow_substitutions": True,
        "budget": None,
    }
    value_flags = {
        "--max": ("max_results", int),
        "--explore": ("exploration", float),
        "--diversity": ("diversity", float),
        "--seed": ("seed", int),
        "--budget": ("budget", parse_budget),
    }

    i = 0
    while i < len(parts):
        arg = parts[i]
        if arg in value_flags:
            key, convert = value_flags[arg]
            if i + 1 >= len(parts):
                raise ValueError(f"{arg} requires a value")
            options[key] = convert(parts[i + 1])
            i += 2
        elif arg == "--no-subs":
            options["allow_substitutions"] = False
            i += 1
        elif arg.startswith("--"):
            raise ValueError(f"Unknown flag '{arg}'")
        elif options["slot"] is None:
            options["slot"] = arg
            i += 1
        else:
            raise ValueError(f"Unexpected argument '{arg}'")

    if options["slot"] is None:
        raise ValueError("Meal slot is required")
    return options


@register_command
class RecommendCommand(Command):
    """Generate ranked meal recommendations."""

    name = ("recommend", "rec")
    help_text = "Recommend meals (recommend <slot> [--max N] [--explore X] ...)"

    def execute(self, args: str) -> None:
        """
        Run a recommendation for the active user.

        Examples:
            recommend lunch
            recommend dinner --max 3 --explore 0.5 --seed 7
            recommend snack --budget kcal=250,protein=10 --no-subs
        """
        if not args.strip():
            print(USAGE)
            return

        try:
            options = parse_recommend_args(args)
        except ValueError as e:
            print(f"Error: {e}")
            print(USAGE)
            return

        profile = self._require_profile()
        if profile is None:
            return

        if options["seed"] is not None:
            self.ctx.engine.sampler.reseed(options["seed"])

        try:
            context = RecommendationContext(
                request_id=self.ctx.next_request_id(),
                meal_slot=options["slot"],
                remaining_budget=options["budget"],
                max_results=options["max_results"],
                diversity_strength=options["diversity"],
                exploration_strength=options["exploration"],
                allow_substitutions=options["allow_substitutions"],
            )
        except InvalidRequestError as e:
            print(f"Error: {e}")
            return

        candidates = self.ctx.catalog.meals
        feedback = list(self.ctx.pending_feedback)
        run = self.ctx.engine.run(profile, context, candidates, feedback)
        response = run.response

        self.ctx.pending_feedback.clear()
        self.ctx.last_response = response
        self.ctx.last_trace = run.trace
        self.ctx.last_state = run.bandit_state
        self.ctx.last_candidates = list(candidates)

        RecommendationReport(response, candidates).render()
