"""Display formatting for dashboard values.

The engine returns unrounded numbers and tagged trends; everything here
decides how they look on screen.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from fitmetrics.analytics.trend import TrendDelta, TrendKind
from fitmetrics.nutrition.models import (
    CalorieBalancePoint,
    MacroShare,
    NutritionSummary,
    NutritionSummaryStats,
)
from fitmetrics.tracking.models import (
    AnnotatedWeightEntry,
    WeightSummaryStats,
    WeightTrendPoint,
)
from fitmetrics.workouts.calories import round_half_up
from fitmetrics.workouts.consistency import ConsistencyReport
from fitmetrics.workouts.models import (
    IntensityDay,
    TypeDistributionPoint,
    WorkoutSummaryStats,
    WorkoutType,
)


def format_trend(delta: TrendDelta) -> str:
    """Render a trend: "N/A" without data, "∞%" when unbounded, else "+12%"."""
    if delta.kind == TrendKind.NO_DATA:
        return "N/A"
    if delta.kind == TrendKind.UNBOUNDED:
        return "∞%" if delta.sign > 0 else "-∞%"
    percent = round_half_up(delta.value)  # type: ignore[arg-type]
    return f"{percent:+d}%" if percent != 0 else "0%"


def trend_style(delta: TrendDelta, higher_is_better: bool = True) -> str:
    """Rich style for a trend cell."""
    if delta.kind == TrendKind.NO_DATA:
        return "dim"
    direction = delta.sign if delta.kind == TrendKind.UNBOUNDED else (delta.value or 0)
    if direction == 0:
        return ""
    improving = direction > 0 if higher_is_better else direction < 0
    return "green" if improving else "red"


def format_duration(minutes: Optional[float]) -> str:
    """Minutes as "1h 30m", "45m" or "0m"."""
    if minutes is None:
        return "-"
    total = max(round_half_up(minutes), 0)
    hours, mins = divmod(total, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_workout_type_label(workout_type: WorkoutType) -> str:
    """'stretching_mobility' -> 'Stretching Mobility'."""
    return workout_type.value.replace("_", " ").title()


def format_optional(value: Optional[float], digits: int = 1, suffix: str = "") -> str:
    """Fixed-point value, or "-" when missing."""
    if value is None:
        return "-"
    return f"{value:.{digits}f}{suffix}"


def format_points(value: Optional[float]) -> str:
    """Percentage-point change such as "+5 pts"."""
    if value is None:
        return "-"
    points = round_half_up(value)
    return f"{points:+d} pts" if points != 0 else "0 pts"


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def _trend_cell(self, delta: TrendDelta, higher_is_better: bool = True) -> str:
        style = trend_style(delta, higher_is_better)
        text = format_trend(delta)
        return f"[{style}]{text}[/{style}]" if style else text

    def weight_history(self, entries: Sequence[AnnotatedWeightEntry], title: str) -> None:
        table = Table(title=title)
        table.add_column("Date", style="cyan")
        table.add_column("Weight (kg)", justify="right")
        table.add_column("Change", justify="right")
        table.add_column("BMI", justify="right", style="blue")
        table.add_column("Notes", style="dim")

        for entry in entries:
            change = (
                f"{entry.change_from_last:+.1f}" if entry.change_from_last is not None else ""
            )
            table.add_row(
                entry.recorded_at.date().isoformat(),
                f"{entry.weight_kg:.1f}",
                change,
                format_optional(entry.bmi),
                entry.notes or "",
            )

        self.console.print(table)

    def weight_summary(self, stats: WeightSummaryStats, title: str) -> None:
        table = Table(title=title)
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        table.add_column("vs previous", justify="right")

        table.add_row("Starting weight", format_optional(stats.starting_weight, suffix=" kg"), "")
        table.add_row(
            "Current weight",
            format_optional(stats.current_weight, suffix=" kg"),
            self._trend_cell(stats.weight_change, higher_is_better=False),
        )
        change = (
            f"{stats.total_change_kg:+.1f} kg" if stats.total_change_kg is not None else "-"
        )
        table.add_row("Total change", change, "")
        table.add_row(
            "BMI",
            format_optional(stats.bmi),
            self._trend_cell(stats.bmi_change, higher_is_better=False),
        )

        self.console.print(table)

    def weight_trend(self, points: Sequence[WeightTrendPoint], title: str) -> None:
        table = Table(title=title)
        table.add_column("From", style="cyan")
        table.add_column("Avg weight (kg)", justify="right")
        table.add_column("BMI", justify="right", style="blue")
        table.add_column("Weigh-ins", justify="right")

        for point in points:
            table.add_row(
                point.start.isoformat(),
                format_optional(point.weight),
                format_optional(point.bmi),
                str(point.entry_count),
            )

        self.console.print(table)

    def workout_summary(self, stats: WorkoutSummaryStats, title: str) -> None:
        table = Table(title=title)
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        table.add_column("vs previous", justify="right")

        table.add_row(
            "Workouts", str(stats.total_workouts), self._trend_cell(stats.workout_change)
        )
        table.add_row(
            "Total time",
            format_duration(stats.total_duration_minutes),
            self._trend_cell(stats.duration_change),
        )
        table.add_row(
            "Calories burned",
            str(round_half_up(stats.total_calories_burned)),
            self._trend_cell(stats.calories_change),
        )
        table.add_row("Avg duration", format_duration(stats.avg_duration_minutes), "")
        avg_calories = stats.avg_calories_per_workout
        table.add_row(
            "Avg calories",
            str(round_half_up(avg_calories)) if avg_calories is not None else "-",
            "",
        )

        self.console.print(table)

    def consistency(self, report: ConsistencyReport, title: str) -> None:
        table = Table(title=title)
        table.add_column("Metric")
        table.add_column("Value", justify="right")

        table.add_row("Current streak", f"{report.current_streak} days")
        table.add_row("Longest streak", f"{report.longest_streak} days")
        if report.longest_run is not None:
            first, last = report.longest_run
            table.add_row("Longest run", f"{first.isoformat()} to {last.isoformat()}")
        table.add_row(
            "Active days", f"{report.workout_days_count} / {report.total_days_in_range}"
        )
        table.add_row("Days per week", format_optional(report.avg_days_per_week))
        last_active = report.last_active_day.isoformat() if report.last_active_day else "-"
        table.add_row("Last active", last_active)

        self.console.print(table)

    def type_distribution(self, points: Sequence[TypeDistributionPoint], title: str) -> None:
        table = Table(title=title)
        table.add_column("Type", style="cyan")
        table.add_column("Workouts", justify="right")
        table.add_column("Share", justify="right")
        table.add_column("Change", justify="right")

        for point in points:
            table.add_row(
                format_workout_type_label(point.workout_type),
                str(point.count),
                f"{round_half_up(point.percent_of_total)}%",
                format_points(point.change_points),
            )

        self.console.print(table)

    def intensity(self, days: Sequence[IntensityDay], title: str) -> None:
        table = Table(title=title)
        table.add_column("Date", style="cyan")
        table.add_column("Level", justify="right")
        table.add_column("", style="magenta")
        table.add_column("Workouts", justify="right")

        for day in days:
            table.add_row(
                day.day.isoformat(),
                str(day.level),
                "█" * day.level,
                str(day.workout_count),
            )

        self.console.print(table)

    def nutrition_day(self, summary: NutritionSummary, title: str) -> None:
        table = Table(title=title)
        table.add_column("Nutrient")
        table.add_column("Consumed", justify="right")
        table.add_column("Target", justify="right")
        table.add_column("Remaining", justify="right")

        rows = [
            ("Calories", summary.consumed.consumed_calories, summary.targets.daily_calories, ""),
            ("Protein", summary.consumed.consumed_protein, summary.targets.daily_protein, " g"),
            ("Carbs", summary.consumed.consumed_carbs, summary.targets.daily_carbs, " g"),
            ("Fat", summary.consumed.consumed_fat, summary.targets.daily_fat, " g"),
        ]
        for name, consumed, target, unit in rows:
            remaining = target - consumed
            style = "green" if remaining >= 0 else "red"
            table.add_row(
                name,
                f"{round_half_up(consumed)}{unit}",
                f"{round_half_up(target)}{unit}",
                f"[{style}]{round_half_up(remaining)}{unit}[/{style}]",
            )

        self.console.print(table)

    def nutrition_summary(self, stats: NutritionSummaryStats, title: str) -> None:
        table = Table(title=title)
        table.add_column("Daily average")
        table.add_column("Value", justify="right")
        table.add_column("vs previous", justify="right")

        avgs = stats.averages
        table.add_row(
            "Calories",
            format_optional(avgs.avg_calories, digits=0),
            self._trend_cell(stats.calories_change),
        )
        table.add_row(
            "Protein",
            format_optional(avgs.avg_protein, suffix=" g"),
            self._trend_cell(stats.protein_change),
        )
        table.add_row(
            "Carbs",
            format_optional(avgs.avg_carbs, suffix=" g"),
            self._trend_cell(stats.carbs_change),
        )
        table.add_row(
            "Fat",
            format_optional(avgs.avg_fat, suffix=" g"),
            self._trend_cell(stats.fat_change),
        )
        if stats.goal_calories is not None:
            table.add_row("Goal", format_optional(stats.goal_calories, digits=0), "")
        if stats.avg_daily_net_calories is not None:
            table.add_row("Net vs goal", f"{stats.avg_daily_net_calories:+.0f}", "")

        self.console.print(table)

    def calorie_balance(self, points: Sequence[CalorieBalancePoint], title: str) -> None:
        table = Table(title=title)
        table.add_column("From", style="cyan")
        table.add_column("Intake", justify="right")
        table.add_column("Goal", justify="right")

        for point in points:
            table.add_row(
                point.start.isoformat(),
                str(round_half_up(point.intake)),
                format_optional(point.goal, digits=0),
            )

        self.console.print(table)

    def macros(self, shares: Sequence[MacroShare], title: str) -> None:
        table = Table(title=title)
        table.add_column("Macro", style="cyan")
        table.add_column("Grams", justify="right")
        table.add_column("Calories", justify="right")
        table.add_column("Change", justify="right")

        for share in shares:
            table.add_row(
                share.name,
                f"{share.grams:.1f} g",
                f"{share.calorie_percent}%",
                format_points(share.change_points),
            )

        self.console.print(table)
