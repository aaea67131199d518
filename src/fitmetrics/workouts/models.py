"""Data models for workout logging and workout dashboards."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from fitmetrics.analytics.trend import TrendDelta
from fitmetrics.errors import InvalidEntryError


class WorkoutType(Enum):
    """Kinds of logged activity."""
    GYM = "gym"
    CARDIO = "cardio"
    STRETCHING_MOBILITY = "stretching_mobility"
    OCCUPATIONAL_ACTIVITY = "occupational_activity"
    HOUSEHOLD_ACTIVITY = "household_activity"
    INDIVIDUAL_SPORT = "individual_sport"
    TEAM_SPORT = "team_sport"
    OUTDOOR_ACTIVITY = "outdoor_activity"


class EffortLevel(Enum):
    """Perceived effort of a workout."""
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"
    INTENSE = "intense"
    MAXIMUM = "maximum"


# Approximate MET values (Compendium of Physical Activities)
WORKOUT_MET_VALUES = {
    WorkoutType.GYM: 5.0,                     # General strength training
    WorkoutType.CARDIO: 7.0,                  # General cardio, e.g. jogging
    WorkoutType.STRETCHING_MOBILITY: 2.5,     # Stretching, hatha yoga
    WorkoutType.OCCUPATIONAL_ACTIVITY: 3.5,   # Light effort work
    WorkoutType.HOUSEHOLD_ACTIVITY: 3.0,      # Light cleaning, cooking
    WorkoutType.INDIVIDUAL_SPORT: 6.5,        # e.g. tennis
    WorkoutType.TEAM_SPORT: 7.5,              # e.g. basketball
    WorkoutType.OUTDOOR_ACTIVITY: 4.0,        # e.g. hiking
}

# Used for workout types that do not resolve to a WorkoutType member
DEFAULT_MET = 3.0

# Scaling applied to the MET estimate by perceived effort
EFFORT_MULTIPLIERS = {
    EffortLevel.EASY: 0.9,
    EffortLevel.MODERATE: 1.0,
    EffortLevel.CHALLENGING: 1.15,
    EffortLevel.INTENSE: 1.3,
    EffortLevel.MAXIMUM: 1.5,
}

# Used for effort levels that do not resolve to an EffortLevel member
DEFAULT_EFFORT_MULTIPLIER = 1.0

# Heatmap intensity level (1-5) per effort level
EFFORT_INTENSITY = {
    EffortLevel.EASY: 1,
    EffortLevel.MODERATE: 2,
    EffortLevel.CHALLENGING: 3,
    EffortLevel.INTENSE: 4,
    EffortLevel.MAXIMUM: 5,
}


@dataclass(frozen=True)
class WorkoutEntry:
    """A single logged workout.

    Non-positive durations are allowed; they just have no computable
    calorie burn.
    """

    workout_type: WorkoutType
    duration_minutes: float
    effort_level: EffortLevel
    occurred_at: datetime
    calories_burned: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.occurred_at, datetime):
            raise InvalidEntryError(
                f"occurred_at must be a datetime, got {type(self.occurred_at).__name__}"
            )
        if self.duration_minutes is None or not math.isfinite(self.duration_minutes):
            raise InvalidEntryError(
                f"duration_minutes must be a finite number, got {self.duration_minutes}"
            )
        if self.calories_burned is not None and (
            not math.isfinite(self.calories_burned) or self.calories_burned < 0
        ):
            raise InvalidEntryError(
                f"calories_burned must be >= 0, got {self.calories_burned}"
            )


@dataclass(frozen=True)
class WorkoutTotals:
    """Raw totals for one period."""

    workout_count: int
    total_duration_minutes: float
    total_calories_burned: float


@dataclass(frozen=True)
class WorkoutSummaryStats:
    """Workout dashboard summary for a period, compared to the previous one."""

    total_workouts: int
    total_duration_minutes: float
    total_calories_burned: float
    avg_duration_minutes: Optional[float]  # None with no workouts
    avg_calories_per_workout: Optional[float]
    workout_change: TrendDelta
    duration_change: TrendDelta
    calories_change: TrendDelta


@dataclass(frozen=True)
class TypeDistributionPoint:
    """Share of one workout type within a period."""

    workout_type: WorkoutType
    count: int
    percent_of_total: float
    change_points: Optional[float]  # vs previous period, in percentage points


@dataclass(frozen=True)
class IntensityDay:
    """Average effort level (1-5) of the workouts on one calendar day."""

    day: date
    level: int
    workout_count: int
