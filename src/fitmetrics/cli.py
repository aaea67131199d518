"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from fitmetrics.analytics.periods import (
    DateWindow,
    PeriodWindows,
    filter_by_window,
    local_date,
    period_windows,
    span_of,
    validate_range,
)
from fitmetrics.analytics.timeseries import granularity_for_range
from fitmetrics.config import get_settings, reload_settings
from fitmetrics.data.log_loader import ActivityLog, LogLoader
from fitmetrics.errors import FitMetricsError
from fitmetrics.export.formatters import (
    TableFormatter,
    format_duration,
    format_trend,
    format_workout_type_label,
)
from fitmetrics.export.serialization import to_jsonable
from fitmetrics.nutrition.aggregator import (
    aggregate_consumption,
    build_summary,
    calorie_balance,
    macro_distribution,
    nutrition_summary_stats,
)
from fitmetrics.profiles.body_calc import UserBiometrics, compute_bmi, compute_bmr, parse_sex
from fitmetrics.tracking.weight_series import (
    annotate_weight_series,
    summarize_weight,
    weight_trend,
)
from fitmetrics.workouts.calories import compute_workout_calories, with_computed_calories
from fitmetrics.workouts.consistency import ConsistencyWindow, compute_consistency
from fitmetrics.workouts.models import WorkoutEntry
from fitmetrics.workouts.summary import (
    build_workout_summary,
    intensity_by_day,
    totals_from_workouts,
    workout_type_distribution,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

app = typer.Typer(
    help="Fitness metrics and progress analytics from activity logs",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
weight_app = typer.Typer(help="Weight history, summary and trend", no_args_is_help=True)
workouts_app = typer.Typer(help="Workout summaries, streaks and distributions", no_args_is_help=True)
nutrition_app = typer.Typer(help="Nutrition intake versus targets", no_args_is_help=True)

app.add_typer(weight_app, name="weight")
app.add_typer(workouts_app, name="workouts")
app.add_typer(nutrition_app, name="nutrition")

LOG_ARGUMENT = typer.Argument(..., help="Activity log (YAML or JSON)", exists=True, dir_okay=False)
RANGE_HELP = "Period: 7d, 30d, 90d, 1y or all (default from config)"
AS_OF_HELP = "Last day of the period, YYYY-MM-DD (default: today)"


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict) -> None:
    """Output JSON response to stdout."""
    print(json.dumps(response, indent=2))


def fail(command: str, message: str, json_output: bool) -> None:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({
            "success": False,
            "command": command,
            "errors": [message],
            "human_summary": f"Failed: {message}",
        })
    else:
        console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@contextmanager
def handle_errors(command: str, json_output: bool) -> Iterator[None]:
    """Turn input and contract errors into a clean exit."""
    try:
        yield
    except (FitMetricsError, ValueError, OSError) as e:
        logger.debug("%s failed", command, exc_info=True)
        fail(command, str(e), json_output)


def use_json(json_flag: bool) -> bool:
    return json_flag or get_settings().defaults.output_format == "json"


def resolve_range(range_key: Optional[str]) -> str:
    return validate_range(range_key or get_settings().defaults.range)


def parse_day(value: Optional[str]) -> date:
    """Parse YYYY-MM-DD, or today in the configured zone when omitted."""
    if value is None:
        return datetime.now(get_settings().zone).date()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def load_log(path: Path) -> ActivityLog:
    return LogLoader(get_settings().zone).load(path)


def range_label(windows: PeriodWindows, as_of: date) -> str:
    if windows.current is None:
        return f"all time to {as_of.isoformat()}"
    return f"{windows.current.start.isoformat()} to {windows.current.end.isoformat()}"


def current_period(
    items: list[T], timestamp_of: Callable[[T], datetime], windows: PeriodWindows, as_of: date
) -> tuple[Optional[DateWindow], list[T]]:
    """Window and items of the current period.

    For the 'all' range the window runs from the first logged day through
    as_of, and is None when nothing was logged by then.
    """
    zone = get_settings().zone
    window = windows.current
    if window is None:
        window = span_of((local_date(timestamp_of(i), zone) for i in items), end=as_of)
        if window is None:
            return None, []
    return window, filter_by_window(items, timestamp_of, window, zone)


def previous_period(
    items: list[T], timestamp_of: Callable[[T], datetime], windows: PeriodWindows
) -> Optional[list[T]]:
    """Items of the previous period, or None when there is nothing to compare."""
    if windows.previous is None:
        return None
    return filter_by_window(items, timestamp_of, windows.previous, get_settings().zone)


def logged_workouts(log: ActivityLog) -> list[WorkoutEntry]:
    """Workouts with calories filled in from the profile weight where missing."""
    return with_computed_calories(log.workouts, log.biometrics.weight_kg)


# ============================================================================
# Root
# ============================================================================


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Settings file (default: ~/.fitmetrics/config.yaml)"
    ),
) -> None:
    """Fitness metrics and progress analytics."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
            force=True,
        )
    try:
        reload_settings(config)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: invalid settings: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def bmr(
    log_path: Optional[Path] = typer.Option(
        None, "--log", help="Read the profile from an activity log", exists=True, dir_okay=False
    ),
    weight_kg: Optional[float] = typer.Option(None, "--weight", "-w", help="Weight in kg"),
    height_cm: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    age_years: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    sex: Optional[str] = typer.Option(None, "--sex", help="male or female"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Basal metabolic rate (Harris-Benedict) and BMI."""
    json_output = use_json(json_output)
    with handle_errors("bmr", json_output):
        profile = load_log(log_path).biometrics if log_path else UserBiometrics()
        biometrics = UserBiometrics(
            weight_kg=weight_kg if weight_kg is not None else profile.weight_kg,
            height_cm=height_cm if height_cm is not None else profile.height_cm,
            age_years=age_years if age_years is not None else profile.age_years,
            sex=parse_sex(sex) if sex is not None else profile.sex,
        )
        value = compute_bmr(biometrics)
        bmi = compute_bmi(biometrics.weight_kg, biometrics.height_cm)

    if value is None:
        summary = "BMR needs positive weight, height and age plus sex"
    else:
        summary = f"BMR: {value:.0f} kcal/day"

    if json_output:
        output_json({
            "success": True,
            "command": "bmr",
            "data": {
                "biometrics": to_jsonable(biometrics),
                "bmr_kcal": value,
                "bmi": bmi,
            },
            "human_summary": summary,
        })
        return

    if value is None:
        console.print(f"[yellow]{summary}[/yellow]")
    else:
        console.print(f"[bold]{summary}[/bold]")
    if bmi is not None:
        console.print(f"BMI: {bmi:.1f}")


@app.command()
def burn(
    workout_type: str = typer.Argument(..., help="Workout type, e.g. gym or cardio"),
    duration_minutes: float = typer.Argument(..., help="Duration in minutes"),
    effort: str = typer.Option("moderate", "--effort", "-e", help="easy ... maximum"),
    weight_kg: Optional[float] = typer.Option(None, "--weight", "-w", help="Body weight in kg"),
    log_path: Optional[Path] = typer.Option(
        None, "--log", help="Take body weight from an activity log", exists=True, dir_okay=False
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate calories burned by a workout.

    Unknown workout types and effort levels use the default MET value and
    multiplier.
    """
    json_output = use_json(json_output)
    with handle_errors("burn", json_output):
        if weight_kg is None and log_path is not None:
            weight_kg = load_log(log_path).biometrics.weight_kg
        calories = compute_workout_calories(workout_type, duration_minutes, effort, weight_kg)

    if calories is None:
        summary = "Cannot estimate: needs a positive body weight and duration"
    else:
        summary = f"{calories} kcal for {format_duration(duration_minutes)} of {workout_type}"

    if json_output:
        output_json({
            "success": True,
            "command": "burn",
            "data": {
                "workout_type": workout_type,
                "duration_minutes": duration_minutes,
                "effort_level": effort,
                "weight_kg": weight_kg,
                "calories": calories,
            },
            "human_summary": summary,
        })
    elif calories is None:
        console.print(f"[yellow]{summary}[/yellow]")
    else:
        console.print(f"[bold green]{summary}[/bold green]")


# ============================================================================
# Weight Commands
# ============================================================================


@weight_app.command("history")
def weight_history(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List weigh-ins with BMI and change from the previous weigh-in."""
    json_output = use_json(json_output)
    with handle_errors("weight history", json_output):
        end = parse_day(as_of)
        windows = period_windows(resolve_range(range_key), end)
        log = load_log(log_path)
        # Annotate the full series so the first entry in the window still
        # has a change from the weigh-in before it.
        annotated = annotate_weight_series(log.weights, log.biometrics.height_cm)
        _, shown = current_period(annotated, lambda e: e.recorded_at, windows, end)

    if json_output:
        output_json({
            "success": True,
            "command": "weight history",
            "data": {
                "range": windows.range_key,
                "entries": [
                    {
                        "recorded_at": e.recorded_at.isoformat(),
                        "weight_kg": e.weight_kg,
                        "bmi": e.bmi,
                        "change_from_last": e.change_from_last,
                        "notes": e.notes,
                    }
                    for e in shown
                ],
            },
            "human_summary": f"{len(shown)} weigh-ins, {range_label(windows, end)}",
        })
        return

    if not shown:
        console.print("No weigh-ins in this period")
        return
    TableFormatter(console).weight_history(
        shown, title=f"Weight History ({range_label(windows, end)})"
    )


@weight_app.command("summary")
def weight_summary(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Current weight and BMI against the previous period."""
    json_output = use_json(json_output)
    with handle_errors("weight summary", json_output):
        end = parse_day(as_of)
        windows = period_windows(resolve_range(range_key), end)
        log = load_log(log_path)
        _, current = current_period(log.weights, lambda e: e.recorded_at, windows, end)
        previous = previous_period(log.weights, lambda e: e.recorded_at, windows)
        stats = summarize_weight(
            current, previous, log.biometrics.height_cm, log.starting_weight_kg
        )

    if stats.current_weight is None:
        summary = "No weigh-ins in this period"
    else:
        summary = (
            f"Weight {stats.current_weight:.1f} kg "
            f"({format_trend(stats.weight_change)} vs previous period)"
        )

    if json_output:
        output_json({
            "success": True,
            "command": "weight summary",
            "data": {"range": windows.range_key, **to_jsonable(stats)},
            "human_summary": summary,
        })
        return

    TableFormatter(console).weight_summary(
        stats, title=f"Weight Summary ({range_label(windows, end)})"
    )


@weight_app.command("trend")
def weight_trend_command(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Average weight per day (7d, 30d) or per week (longer ranges)."""
    json_output = use_json(json_output)
    with handle_errors("weight trend", json_output):
        settings = get_settings()
        end = parse_day(as_of)
        key = resolve_range(range_key)
        windows = period_windows(key, end)
        log = load_log(log_path)
        window, entries = current_period(log.weights, lambda e: e.recorded_at, windows, end)
        points = weight_trend(
            entries,
            log.biometrics.height_cm,
            granularity_for_range(key),
            settings.zone,
            span=window,
            week_start=settings.week_start,
        )

    if json_output:
        output_json({
            "success": True,
            "command": "weight trend",
            "data": {
                "range": key,
                "granularity": granularity_for_range(key).value,
                "points": to_jsonable(points),
            },
            "human_summary": f"{len(points)} {granularity_for_range(key).value} points",
        })
        return

    if not points:
        console.print("No weigh-ins in this period")
        return
    TableFormatter(console).weight_trend(points, title=f"Weight Trend ({range_label(windows, end)})")


# ============================================================================
# Workout Commands
# ============================================================================


@workouts_app.command("summary")
def workouts_summary(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Workout count, time and calories against the previous period."""
    json_output = use_json(json_output)
    with handle_errors("workouts summary", json_output):
        end = parse_day(as_of)
        windows = period_windows(resolve_range(range_key), end)
        workouts = logged_workouts(load_log(log_path))
        _, current = current_period(workouts, lambda e: e.occurred_at, windows, end)
        previous = previous_period(workouts, lambda e: e.occurred_at, windows)
        stats = build_workout_summary(
            totals_from_workouts(current),
            totals_from_workouts(previous) if previous is not None else None,
        )

    summary = (
        f"{stats.total_workouts} workouts ({format_trend(stats.workout_change)}), "
        f"{format_duration(stats.total_duration_minutes)} total"
    )

    if json_output:
        output_json({
            "success": True,
            "command": "workouts summary",
            "data": {"range": windows.range_key, **to_jsonable(stats)},
            "human_summary": summary,
        })
        return

    TableFormatter(console).workout_summary(
        stats, title=f"Workout Summary ({range_label(windows, end)})"
    )


@workouts_app.command("consistency")
def workouts_consistency(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Current and longest workout streaks and active days."""
    json_output = use_json(json_output)
    with handle_errors("workouts consistency", json_output):
        zone = get_settings().zone
        end = parse_day(as_of)
        windows = period_windows(resolve_range(range_key), end)
        workouts = load_log(log_path).workouts
        window, _ = current_period(workouts, lambda e: e.occurred_at, windows, end)
        if window is None:
            window = DateWindow(end, end)
        report = compute_consistency(ConsistencyWindow.from_workouts(workouts, window, zone))

    summary = (
        f"Current streak {report.current_streak} days, longest {report.longest_streak}, "
        f"active {report.workout_days_count}/{report.total_days_in_range} days"
    )

    if json_output:
        output_json({
            "success": True,
            "command": "workouts consistency",
            "data": {
                "range": windows.range_key,
                "window": to_jsonable(window),
                **to_jsonable(report),
            },
            "human_summary": summary,
        })
        return

    TableFormatter(console).consistency(
        report, title=f"Consistency ({window.start.isoformat()} to {window.end.isoformat()})"
    )


@workouts_app.command("types")
def workouts_types(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Workouts per type and share of the period."""
    json_output = use_json(json_output)
    with handle_errors("workouts types", json_output):
        end = parse_day(as_of)
        windows = period_windows(resolve_range(range_key), end)
        workouts = load_log(log_path).workouts
        _, current = current_period(workouts, lambda e: e.occurred_at, windows, end)
        previous = previous_period(workouts, lambda e: e.occurred_at, windows)
        points = workout_type_distribution(current, previous)

    if points:
        top = points[0]
        summary = (
            f"{len(points)} workout types, most often "
            f"{format_workout_type_label(top.workout_type)} ({top.count})"
        )
    else:
        summary = "No workouts in this period"

    if json_output:
        output_json({
            "success": True,
            "command": "workouts types",
            "data": {"range": windows.range_key, "types": to_jsonable(points)},
            "human_summary": summary,
        })
        return

    if not points:
        console.print(summary)
        return
    TableFormatter(console).type_distribution(
        points, title=f"Workout Types ({range_label(windows, end)})"
    )


@workouts_app.command("intensity")
def workouts_intensity(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Average effort level (1-5) per workout day."""
    json_output = use_json(json_output)
    with handle_errors("workouts intensity", json_output):
        zone = get_settings().zone
        end = parse_day(as_of)
        windows = period_windows(resolve_range(range_key), end)
        _, workouts = current_period(
            load_log(log_path).workouts, lambda e: e.occurred_at, windows, end
        )
        days = intensity_by_day(workouts, zone)

    if json_output:
        output_json({
            "success": True,
            "command": "workouts intensity",
            "data": {"range": windows.range_key, "days": to_jsonable(days)},
            "human_summary": f"{len(days)} active days",
        })
        return

    if not days:
        console.print("No workouts in this period")
        return
    TableFormatter(console).intensity(days, title=f"Intensity ({range_label(windows, end)})")


# ============================================================================
# Nutrition Commands
# ============================================================================


@nutrition_app.command("day")
def nutrition_day(
    log_path: Path = LOG_ARGUMENT,
    day_str: Optional[str] = typer.Option(None, "--date", "-d", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Intake for one day against the daily targets."""
    json_output = use_json(json_output)
    with handle_errors("nutrition day", json_output):
        zone = get_settings().zone
        day = parse_day(day_str)
        log = load_log(log_path)
        if log.targets is None:
            raise ValueError("The activity log has no nutrition targets")
        meals = filter_by_window(log.meals, lambda e: e.occurred_at, DateWindow(day, day), zone)
        summary = build_summary(log.targets, aggregate_consumption(meals))

    consumed = summary.consumed.consumed_calories
    human = (
        f"{consumed:.0f} of {summary.targets.daily_calories:.0f} kcal "
        f"on {day.isoformat()} ({len(meals)} entries)"
    )

    if json_output:
        output_json({
            "success": True,
            "command": "nutrition day",
            "data": {"date": day.isoformat(), "entries": len(meals), **to_jsonable(summary)},
            "human_summary": human,
        })
        return

    TableFormatter(console).nutrition_day(summary, title=f"Nutrition {day.isoformat()}")


@nutrition_app.command("summary")
def nutrition_summary(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Daily averages against the previous period, with calorie balance."""
    json_output = use_json(json_output)
    with handle_errors("nutrition summary", json_output):
        settings = get_settings()
        zone = settings.zone
        end = parse_day(as_of)
        key = resolve_range(range_key)
        windows = period_windows(key, end)
        log = load_log(log_path)
        goal = log.targets.daily_calories if log.targets else None

        window, current = current_period(log.meals, lambda e: e.occurred_at, windows, end)
        previous = previous_period(log.meals, lambda e: e.occurred_at, windows)
        previous_days = windows.previous.days if windows.previous is not None else 0

        stats = nutrition_summary_stats(
            current,
            window.days if window else 0,
            previous,
            previous_days,
            goal_calories=goal,
        )
        balance = []
        if window is not None:
            balance = calorie_balance(
                current,
                window,
                granularity_for_range(key),
                zone,
                goal_calories=goal,
                week_start=settings.week_start,
            )

    avg = stats.averages.avg_calories
    human = (
        f"Average {avg:.0f} kcal/day ({format_trend(stats.calories_change)} vs previous period)"
        if avg is not None
        else "No meals in this period"
    )

    if json_output:
        output_json({
            "success": True,
            "command": "nutrition summary",
            "data": {
                "range": key,
                **to_jsonable(stats),
                "balance": to_jsonable(balance),
            },
            "human_summary": human,
        })
        return

    formatter = TableFormatter(console)
    formatter.nutrition_summary(stats, title=f"Nutrition Summary ({range_label(windows, end)})")
    if balance:
        formatter.calorie_balance(balance, title="Calorie Balance")


@nutrition_app.command("macros")
def nutrition_macros(
    log_path: Path = LOG_ARGUMENT,
    range_key: Optional[str] = typer.Option(None, "--range", "-r", help=RANGE_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Share of calories from protein, carbs and fat."""
    json_output = use_json(json_output)
    with handle_errors("nutrition macros", json_output):
        end = parse_day(as_of)
        windows = period_windows(resolve_range(range_key), end)
        meals = load_log(log_path).meals
        _, current = current_period(meals, lambda e: e.occurred_at, windows, end)
        previous = previous_period(meals, lambda e: e.occurred_at, windows)
        shares = macro_distribution(current, previous)

    if shares:
        human = ", ".join(f"{s.name} {s.calorie_percent}%" for s in shares)
    else:
        human = "No macro calories in this period"

    if json_output:
        output_json({
            "success": True,
            "command": "nutrition macros",
            "data": {"range": windows.range_key, "macros": to_jsonable(shares)},
            "human_summary": human,
        })
        return

    if not shares:
        console.print(human)
        return
    TableFormatter(console).macros(shares, title=f"Macros ({range_label(windows, end)})")


if __name__ == "__main__":
    app()
