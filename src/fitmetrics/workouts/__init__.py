"""Workout calories, summaries and consistency streaks."""

from __future__ import annotations

from fitmetrics.workouts.calories import compute_workout_calories, with_computed_calories
from fitmetrics.workouts.consistency import (
    ConsistencyReport,
    ConsistencyWindow,
    compute_consistency,
)
from fitmetrics.workouts.models import (
    EffortLevel,
    WorkoutEntry,
    WorkoutSummaryStats,
    WorkoutTotals,
    WorkoutType,
)
from fitmetrics.workouts.summary import build_workout_summary, totals_from_workouts

__all__ = [
    "ConsistencyReport",
    "ConsistencyWindow",
    "EffortLevel",
    "WorkoutEntry",
    "WorkoutSummaryStats",
    "WorkoutTotals",
    "WorkoutType",
    "build_workout_summary",
    "compute_consistency",
    "compute_workout_calories",
    "totals_from_workouts",
    "with_computed_calories",
]
