"""Workout dashboard aggregates: period totals, trends, distributions."""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from datetime import date, tzinfo
from typing import Iterable, Optional, Sequence

from fitmetrics.analytics.periods import DateWindow, local_date
from fitmetrics.analytics.timeseries import Bucket, Granularity, bucket_series
from fitmetrics.analytics.trend import PeriodStats, TrendDelta, percent_change
from fitmetrics.workouts.calories import round_half_up
from fitmetrics.workouts.models import (
    EFFORT_INTENSITY,
    IntensityDay,
    TypeDistributionPoint,
    WorkoutEntry,
    WorkoutSummaryStats,
    WorkoutTotals,
)


def totals_from_workouts(entries: Iterable[WorkoutEntry]) -> WorkoutTotals:
    """Sum count, duration and calories. Workouts without calories add 0."""
    entries = list(entries)
    return WorkoutTotals(
        workout_count=len(entries),
        total_duration_minutes=math.fsum(e.duration_minutes for e in entries),
        total_calories_burned=math.fsum(e.calories_burned or 0.0 for e in entries),
    )


def build_workout_summary(
    current: WorkoutTotals,
    previous: Optional[WorkoutTotals] = None,
) -> WorkoutSummaryStats:
    """Summarize a period and compare it to the previous one.

    Args:
        current: Totals for the current period
        previous: Totals for the previous period of the same length, or
                  None when there is no comparison period (the 'all' range)

    Returns:
        WorkoutSummaryStats. Without a previous period every change is
        NO_DATA.
    """
    count = current.workout_count
    avg_duration = current.total_duration_minutes / count if count > 0 else None
    avg_calories = current.total_calories_burned / count if count > 0 else None

    if previous is None:
        workout_change = duration_change = calories_change = TrendDelta.no_data()
    else:
        workout_change = percent_change(count, previous.workout_count)
        duration_change = percent_change(
            current.total_duration_minutes, previous.total_duration_minutes
        )
        calories_change = percent_change(
            current.total_calories_burned, previous.total_calories_burned
        )

    return WorkoutSummaryStats(
        total_workouts=count,
        total_duration_minutes=current.total_duration_minutes,
        total_calories_burned=current.total_calories_burned,
        avg_duration_minutes=avg_duration,
        avg_calories_per_workout=avg_calories,
        workout_change=workout_change,
        duration_change=duration_change,
        calories_change=calories_change,
    )


def summarize_workout_periods(stats: PeriodStats[WorkoutTotals]) -> WorkoutSummaryStats:
    """build_workout_summary for a PeriodStats pair."""
    return build_workout_summary(stats.current, stats.previous)


def workout_type_distribution(
    current: Sequence[WorkoutEntry],
    previous: Optional[Sequence[WorkoutEntry]] = None,
) -> list[TypeDistributionPoint]:
    """Count workouts per type and their share of the period.

    Types are ordered by count, most frequent first; equal counts keep the
    order in which the types first appear. The change is the difference in
    share (percentage points) against the previous period, None when there
    is no previous period.
    """
    current_counts = Counter(e.workout_type for e in current)
    current_total = len(current)
    if current_total == 0:
        return []

    previous_counts: Counter = Counter()
    previous_total = 0
    if previous is not None:
        previous_counts = Counter(e.workout_type for e in previous)
        previous_total = len(previous)

    points = []
    for workout_type, count in current_counts.items():
        percent = count / current_total * 100
        change = None
        if previous is not None:
            previous_percent = (
                previous_counts[workout_type] / previous_total * 100
                if previous_total > 0
                else 0.0
            )
            change = percent - previous_percent
        points.append(
            TypeDistributionPoint(
                workout_type=workout_type,
                count=count,
                percent_of_total=percent,
                change_points=change,
            )
        )

    return sorted(points, key=lambda p: p.count, reverse=True)


def intensity_by_day(entries: Iterable[WorkoutEntry], tz: tzinfo) -> list[IntensityDay]:
    """Average effort level per calendar day, for a heatmap.

    The average is rounded half up and clamped to 1-5.
    """
    levels: dict[date, list[int]] = defaultdict(list)
    for entry in entries:
        levels[local_date(entry.occurred_at, tz)].append(EFFORT_INTENSITY[entry.effort_level])

    days = []
    for day in sorted(levels):
        day_levels = levels[day]
        average = sum(day_levels) / len(day_levels)
        days.append(
            IntensityDay(
                day=day,
                level=max(1, min(round_half_up(average), 5)),
                workout_count=len(day_levels),
            )
        )
    return days


def duration_buckets(
    entries: Iterable[WorkoutEntry],
    granularity: Granularity,
    tz: tzinfo,
    span: Optional[DateWindow] = None,
    week_start: int = 0,
) -> list[Bucket]:
    """Total workout minutes per day or week."""
    points = [(local_date(e.occurred_at, tz), e.duration_minutes) for e in entries]
    return bucket_series(points, granularity, span=span, week_start=week_start)


def calorie_buckets(
    entries: Iterable[WorkoutEntry],
    granularity: Granularity,
    tz: tzinfo,
    span: Optional[DateWindow] = None,
    week_start: int = 0,
) -> list[Bucket]:
    """Total calories burned per day or week.

    Only workouts with a calorie value are counted.
    """
    points = [
        (local_date(e.occurred_at, tz), e.calories_burned)
        for e in entries
        if e.calories_burned is not None
    ]
    return bucket_series(points, granularity, span=span, week_start=week_start)
