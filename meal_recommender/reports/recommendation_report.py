# meal_recommender/reports/recommendation_report.py
"""
Terminal rendering of recommendation results.

Builds rich tables for the ranked list, rejection counters, bandit arms
and the rejection trace of the last run.
"""
from typing import Dict, Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from meal_recommender.filters import FilterTraceEntry
from meal_recommender.models import BanditState, MealCandidate, RecommendationResponse

console = Console()


class RecommendationReport:
    """
    Renders a RecommendationResponse for the terminal.

    Meal titles are looked up in the candidate pool when one is given;
    otherwise meal ids are shown on their own.
    """

    def __init__(self, response: RecommendationResponse,
                 meals: Optional[Iterable[MealCandidate]] = None):
        """
        Initialize report.

        Args:
            response: Response to render
            meals: Candidate pool used for the request (for titles)
        """
        self.response = response
        self.titles: Dict[str, str] = {m.meal_id: m.title for m in (meals or [])}

    def recommendations_table(self) -> Table:
        table = Table(title=f"Recommendations ({self.response.request_id})")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Meal")
        table.add_column("Score", justify="right", style="bold")
        table.add_column("Portion", justify="right")
        table.add_column("Reasons")
        table.add_column("Substitutions")

        for rank, rec in enumerate(self.response.recommendations, 1):
            title = self.titles.get(rec.meal_id)
            label = f"{title} [dim]({rec.meal_id})[/dim]" if title else rec.meal_id
            subs = "\n".join(
                f"{s.from_ingredient} -> {s.to_ingredient}"
                for s in rec.adjustments.substitutions
            )
            table.add_row(
                str(rank),
                label,
                f"{rec.score:.4f}",
                f"x{rec.adjustments.portion_multiplier:.2f}",
                ", ".join(rec.reasons),
                subs or "-",
            )
        return table

    def counts_table(self) -> Table:
        table = Table(title="Filtered out")
        table.add_column("Reason")
        table.add_column("Count", justify="right")
        for key, count in self.response.filtered_out_counts.to_dict().items():
            style = "red" if count else "dim"
            table.add_row(key, f"[{style}]{count}[/{style}]")
        return table

    def fallback_panel(self) -> Panel:
        fallback = self.response.fallback
        lines = [f"[bold]{fallback.reason}[/bold]", ""]
        lines.extend(f"- {s}" for s in fallback.suggestions)
        return Panel("\n".join(lines), title="Fallback suggestions", border_style="yellow")

    def render(self, out: Optional[Console] = None) -> None:
        """Print the full report."""
        out = out or console
        if self.response.fallback.invoked:
            out.print(self.fallback_panel())
        else:
            out.print(self.recommendations_table())
        out.print(self.counts_table())

        if self.response.bandit_updates.applied:
            out.print(f"[green]Bandit updated[/green] "
                      f"({len(self.response.bandit_updates.arms)} arm(s) tracked)")
        for rule in self.response.audit.rules_applied:
            out.print(f"[dim]{rule}[/dim]")
        out.print()


def arms_table(state: BanditState) -> Table:
    """
    Table of bandit arms sorted by posterior mean.

    Args:
        state: Bandit state to show

    Returns:
        rich Table
    """
    table = Table(title=f"Bandit arms ({state.user_id or 'unknown user'})")
    table.add_column("Arm")
    table.add_column("Alpha", justify="right")
    table.add_column("Beta", justify="right")
    table.add_column("Mean", justify="right", style="bold")
    table.add_column("Changed", justify="center")

    ranked = sorted(state.arms.items(), key=lambda item: item[1].mean, reverse=True)
    for key, arm in ranked:
        table.add_row(
            key,
            f"{arm.alpha:.2f}",
            f"{arm.beta:.2f}",
            f"{arm.mean:.3f}",
            "*" if key in state.deltas else "",
        )
    return table


def trace_table(trace: Iterable[FilterTraceEntry]) -> Table:
    """Table of rejected candidates with the check that rejected them."""
    table = Table(title="Rejection trace")
    table.add_column("Meal")
    table.add_column("Bucket", style="red")
    table.add_column("Detail")
    for entry in trace:
        table.add_row(f"{entry.title} [dim]({entry.meal_id})[/dim]",
                      entry.bucket.value, entry.detail)
    return table
