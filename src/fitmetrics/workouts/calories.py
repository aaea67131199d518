"""Workout calorie burn estimates from MET values.

    calories/minute = MET × weight_kg × 3.5 / 200
    total           = round(calories/minute × minutes × effort multiplier)

Rounding is half away from zero (10.5 -> 11), not Python's banker's
rounding.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from enum import Enum
from typing import Iterable, Optional, TypeVar, Union

from fitmetrics.workouts.models import (
    DEFAULT_EFFORT_MULTIPLIER,
    DEFAULT_MET,
    EFFORT_MULTIPLIERS,
    WORKOUT_MET_VALUES,
    EffortLevel,
    WorkoutEntry,
    WorkoutType,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def coerce_enum(enum_cls: type[E], value: Union[E, str, None]) -> Optional[E]:
    """Resolve a member or its string value; None if it does not resolve."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


def met_for(workout_type: Union[WorkoutType, str]) -> float:
    """MET value for a workout type, DEFAULT_MET if the type is unknown."""
    resolved = coerce_enum(WorkoutType, workout_type)
    if resolved is None:
        logger.debug("No MET value for workout type %r, using %s", workout_type, DEFAULT_MET)
        return DEFAULT_MET
    return WORKOUT_MET_VALUES[resolved]


def effort_multiplier_for(effort_level: Union[EffortLevel, str]) -> float:
    """Effort multiplier, DEFAULT_EFFORT_MULTIPLIER if the level is unknown."""
    resolved = coerce_enum(EffortLevel, effort_level)
    if resolved is None:
        logger.debug(
            "No multiplier for effort level %r, using %s",
            effort_level,
            DEFAULT_EFFORT_MULTIPLIER,
        )
        return DEFAULT_EFFORT_MULTIPLIER
    return EFFORT_MULTIPLIERS[resolved]


def compute_workout_calories(
    workout_type: Union[WorkoutType, str],
    duration_minutes: float,
    effort_level: Union[EffortLevel, str],
    user_weight_kg: Optional[float],
) -> Optional[int]:
    """Estimate calories burned by a workout.

    Args:
        workout_type: Workout type (member or string value)
        duration_minutes: Duration in minutes
        effort_level: Perceived effort (member or string value)
        user_weight_kg: Body weight in kilograms

    Returns:
        Whole calories, or None if the weight is missing, non-positive or
        not finite, or the duration is non-positive or not finite. None means "not computable", which is
        different from a burn of 0.
    """
    if user_weight_kg is None or not math.isfinite(user_weight_kg) or user_weight_kg <= 0:
        return None
    if not math.isfinite(duration_minutes) or duration_minutes <= 0:
        return None

    met = met_for(workout_type)
    multiplier = effort_multiplier_for(effort_level)

    calories_per_minute = met * user_weight_kg * 3.5 / 200
    return round_half_up(calories_per_minute * duration_minutes * multiplier)


def calories_for_entry(entry: WorkoutEntry, user_weight_kg: Optional[float]) -> Optional[int]:
    """compute_workout_calories for a logged workout."""
    return compute_workout_calories(
        entry.workout_type,
        entry.duration_minutes,
        entry.effort_level,
        user_weight_kg,
    )


def with_computed_calories(
    entries: Iterable[WorkoutEntry],
    user_weight_kg: Optional[float],
) -> list[WorkoutEntry]:
    """Fill in calories_burned where it was not logged.

    Entries that already carry a value are returned as-is. Returns new
    entries; the inputs are not modified.
    """
    result = []
    for entry in entries:
        if entry.calories_burned is None:
            calories = calories_for_entry(entry, user_weight_kg)
            if calories is not None:
                entry = replace(entry, calories_burned=float(calories))
        result.append(entry)
    return result
