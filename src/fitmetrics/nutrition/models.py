"""Data models for food logging and nutrition dashboards."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from fitmetrics.analytics.trend import TrendDelta
from fitmetrics.errors import InvalidEntryError


class MealType(Enum):
    """Meal slot a food entry was logged under."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class FoodLogEntry:
    """A logged meal or food item with its macronutrients."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    occurred_at: datetime
    meal_type: MealType
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.occurred_at, datetime):
            raise InvalidEntryError(
                f"occurred_at must be a datetime, got {type(self.occurred_at).__name__}"
            )
        for field_name in ("calories", "protein_g", "carbs_g", "fat_g"):
            value = getattr(self, field_name)
            if value is None or not math.isfinite(value) or value < 0:
                raise InvalidEntryError(f"{field_name} must be >= 0, got {value}")


@dataclass(frozen=True)
class NutritionTargets:
    """Daily intake targets for a user."""

    daily_calories: float
    daily_protein: float
    daily_carbs: float
    daily_fat: float


@dataclass(frozen=True)
class ConsumedNutrients:
    """Summed intake over a set of food entries."""

    consumed_calories: float = 0.0
    consumed_protein: float = 0.0
    consumed_carbs: float = 0.0
    consumed_fat: float = 0.0


@dataclass(frozen=True)
class NutritionSummary:
    """Targets paired with what was consumed."""

    targets: NutritionTargets
    consumed: ConsumedNutrients


@dataclass(frozen=True)
class DailyAverages:
    """Per-day average intake over a period (None for an empty period)."""

    avg_calories: Optional[float]
    avg_protein: Optional[float]
    avg_carbs: Optional[float]
    avg_fat: Optional[float]


@dataclass(frozen=True)
class MacroShare:
    """Share of macro calories from one macronutrient."""

    name: str  # "Protein", "Carbs" or "Fat"
    grams: float
    calorie_percent: int  # The three shares sum to 100
    change_points: Optional[int]  # vs previous period


@dataclass(frozen=True)
class NutritionSummaryStats:
    """Nutrition dashboard summary for a period."""

    averages: DailyAverages
    avg_daily_net_calories: Optional[float]  # Average intake minus goal
    goal_calories: Optional[float]
    calories_change: TrendDelta
    protein_change: TrendDelta
    carbs_change: TrendDelta
    fat_change: TrendDelta


@dataclass(frozen=True)
class CalorieBalancePoint:
    """Intake for one chart bucket next to the goal for that bucket."""

    start: date
    intake: float
    goal: Optional[float]
