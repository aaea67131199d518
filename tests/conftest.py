"""Pytest fixtures for fitmetrics tests."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

from fitmetrics.nutrition.models import FoodLogEntry, MealType
from fitmetrics.tracking.models import WeightEntry
from fitmetrics.workouts.models import EffortLevel, WorkoutEntry, WorkoutType

UTC = timezone.utc


@pytest.fixture
def at():
    """Build an aware UTC timestamp: at(2025, 1, 6) is noon on that day."""

    def _at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
        return datetime(year, month, day, hour, minute, tzinfo=UTC)

    return _at


@pytest.fixture
def make_workout(at):
    """Factory for WorkoutEntry with sensible defaults."""

    def _make(
        day: tuple[int, int, int],
        workout_type: WorkoutType = WorkoutType.GYM,
        duration_minutes: float = 60,
        effort_level: EffortLevel = EffortLevel.MODERATE,
        calories_burned: Optional[float] = None,
        hour: int = 12,
    ) -> WorkoutEntry:
        return WorkoutEntry(
            workout_type=workout_type,
            duration_minutes=duration_minutes,
            effort_level=effort_level,
            occurred_at=at(*day, hour=hour),
            calories_burned=calories_burned,
        )

    return _make


@pytest.fixture
def make_meal(at):
    """Factory for FoodLogEntry."""

    def _make(
        day: tuple[int, int, int],
        calories: float = 500,
        protein_g: float = 30,
        carbs_g: float = 50,
        fat_g: float = 15,
        meal_type: MealType = MealType.LUNCH,
        hour: int = 12,
    ) -> FoodLogEntry:
        return FoodLogEntry(
            calories=calories,
            protein_g=protein_g,
            carbs_g=carbs_g,
            fat_g=fat_g,
            occurred_at=at(*day, hour=hour),
            meal_type=meal_type,
        )

    return _make


@pytest.fixture
def make_weight(at):
    """Factory for WeightEntry."""

    def _make(day: tuple[int, int, int], weight_kg: float, hour: int = 7) -> WeightEntry:
        return WeightEntry(weight_kg=weight_kg, recorded_at=at(*day, hour=hour))

    return _make


SAMPLE_LOG = """\
profile:
  weight_kg: 80
  height_cm: 180
  age_years: 35
  sex: male
  starting_weight_kg: 84

targets:
  daily_calories: 2200
  daily_protein: 160
  daily_carbs: 220
  daily_fat: 70

workouts:
  # previous week (2024-12-30 .. 2025-01-05)
  - {type: cardio, duration_minutes: 30, effort_level: easy, occurred_at: "2024-12-31T08:00:00"}
  - {type: gym, duration_minutes: 60, effort_level: moderate, occurred_at: "2025-01-02T18:00:00", calories_burned: 400}
  # current week (2025-01-06 .. 2025-01-12)
  - {type: gym, duration_minutes: 60, effort_level: moderate, occurred_at: "2025-01-06T18:00:00"}
  - {type: gym, duration_minutes: 45, effort_level: challenging, occurred_at: "2025-01-07T18:00:00"}
  - {type: cardio, duration_minutes: 30, effort_level: intense, occurred_at: "2025-01-08T07:30:00"}
  - {type: gym, duration_minutes: 60, effort_level: moderate, occurred_at: "2025-01-10T18:00:00"}
  - {type: team_sport, duration_minutes: 90, effort_level: maximum, occurred_at: "2025-01-11T10:00:00"}
  - {type: stretching_mobility, duration_minutes: 20, effort_level: easy, occurred_at: "2025-01-12T09:00:00"}

meals:
  - {calories: 2000, protein_g: 100, carbs_g: 200, fat_g: 50, occurred_at: "2025-01-03T12:00:00", meal_type: lunch}
  - {calories: 600, protein_g: 40, carbs_g: 60, fat_g: 20, occurred_at: "2025-01-12T08:00:00", meal_type: breakfast}
  - {calories: 900, protein_g: 60, carbs_g: 90, fat_g: 30, occurred_at: "2025-01-12T13:00:00", meal_type: lunch, name: rice bowl}
  - {calories: 700, protein_g: 50, carbs_g: 70, fat_g: 25, occurred_at: "2025-01-11T19:00:00", meal_type: dinner}

weights:
  - {weight_kg: 81.0, recorded_at: "2025-01-03T07:00:00"}
  - {weight_kg: 80.0, recorded_at: "2025-01-06T07:00:00"}
  - {weight_kg: 79.5, recorded_at: "2025-01-12T07:00:00", notes: after holidays}
"""


@pytest.fixture
def sample_log(tmp_path: Path) -> Path:
    """Write the sample activity log and return its path."""
    path = tmp_path / "log.yaml"
    path.write_text(SAMPLE_LOG)
    return path


@pytest.fixture
def utc_config(tmp_path: Path) -> Path:
    """Settings file pinning the zone to UTC and weeks to Monday."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "time:\n"
        "  timezone: UTC\n"
        "  week_starts_on: monday\n"
        "defaults:\n"
        "  range: 7d\n"
        "  output_format: table\n"
    )
    return path
