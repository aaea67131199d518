"""Nutrition consumption totals, targets and macro breakdowns."""

from __future__ import annotations

from fitmetrics.nutrition.aggregator import (
    aggregate_consumption,
    build_summary,
    daily_averages,
    macro_distribution,
)
from fitmetrics.nutrition.models import (
    ConsumedNutrients,
    FoodLogEntry,
    MealType,
    NutritionSummary,
    NutritionTargets,
)

__all__ = [
    "ConsumedNutrients",
    "FoodLogEntry",
    "MealType",
    "NutritionSummary",
    "NutritionTargets",
    "aggregate_consumption",
    "build_summary",
    "daily_averages",
    "macro_distribution",
]
