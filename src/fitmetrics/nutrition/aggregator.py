"""Aggregate logged food entries into consumption totals and averages.

Sums use math.fsum, so totals do not depend on the order of the entries.
None of these functions filter by date or meal type; pass in only the
entries for the period you want.
"""

from __future__ import annotations

import math
from datetime import tzinfo
from typing import Iterable, Optional, Sequence

from fitmetrics.analytics.periods import DateWindow, local_date
from fitmetrics.analytics.timeseries import Granularity, bucket_series
from fitmetrics.analytics.trend import TrendDelta, percent_change
from fitmetrics.nutrition.models import (
    CalorieBalancePoint,
    ConsumedNutrients,
    DailyAverages,
    FoodLogEntry,
    MacroShare,
    NutritionSummary,
    NutritionSummaryStats,
    NutritionTargets,
)
from fitmetrics.workouts.calories import round_half_up

# Atwater factors (kcal per gram)
PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9


def aggregate_consumption(entries: Iterable[FoodLogEntry]) -> ConsumedNutrients:
    """Sum calories, protein, carbs and fat over entries.

    An empty input gives all-zero totals.
    """
    entries = list(entries)
    return ConsumedNutrients(
        consumed_calories=math.fsum(e.calories for e in entries),
        consumed_protein=math.fsum(e.protein_g for e in entries),
        consumed_carbs=math.fsum(e.carbs_g for e in entries),
        consumed_fat=math.fsum(e.fat_g for e in entries),
    )


def build_summary(targets: NutritionTargets, consumed: ConsumedNutrients) -> NutritionSummary:
    """Pair targets with consumption."""
    return NutritionSummary(targets=targets, consumed=consumed)


def daily_averages(entries: Iterable[FoodLogEntry], period_days: int) -> DailyAverages:
    """Average daily intake over a period of period_days days.

    Days without entries count toward the average as zero intake.
    """
    if period_days <= 0:
        return DailyAverages(None, None, None, None)

    consumed = aggregate_consumption(entries)
    return DailyAverages(
        avg_calories=consumed.consumed_calories / period_days,
        avg_protein=consumed.consumed_protein / period_days,
        avg_carbs=consumed.consumed_carbs / period_days,
        avg_fat=consumed.consumed_fat / period_days,
    )


def _macro_percents(consumed: ConsumedNutrients) -> Optional[tuple[int, int, int]]:
    """Integer calorie percents (protein, carbs, fat) that sum to 100.

    Any rounding remainder goes to the largest share: carbs first, then
    protein, then fat. None when there are no macro calories.
    """
    protein_kcal = consumed.consumed_protein * PROTEIN_KCAL_PER_G
    carbs_kcal = consumed.consumed_carbs * CARBS_KCAL_PER_G
    fat_kcal = consumed.consumed_fat * FAT_KCAL_PER_G
    total_kcal = protein_kcal + carbs_kcal + fat_kcal
    if total_kcal <= 0:
        return None

    protein = round_half_up(protein_kcal / total_kcal * 100)
    carbs = round_half_up(carbs_kcal / total_kcal * 100)
    fat = round_half_up(fat_kcal / total_kcal * 100)

    diff = 100 - (protein + carbs + fat)
    if diff:
        if carbs >= protein and carbs >= fat:
            carbs += diff
        elif protein >= fat:
            protein += diff
        else:
            fat += diff
    return protein, carbs, fat


def macro_distribution(
    current: Sequence[FoodLogEntry],
    previous: Optional[Sequence[FoodLogEntry]] = None,
) -> list[MacroShare]:
    """Share of calories from protein, carbs and fat.

    Args:
        current: Entries for the current period
        previous: Entries for the previous period, or None for no comparison

    Returns:
        Protein, Carbs and Fat shares (in that order), or an empty list when
        the current period has no macro calories. change_points is the
        difference against the previous period's share (a previous period
        with no data counts as 0%).
    """
    consumed = aggregate_consumption(current)
    percents = _macro_percents(consumed)
    if percents is None:
        return []

    previous_percents: Optional[tuple[int, int, int]] = None
    if previous is not None:
        previous_percents = _macro_percents(aggregate_consumption(previous)) or (0, 0, 0)

    grams = (consumed.consumed_protein, consumed.consumed_carbs, consumed.consumed_fat)
    shares = []
    for index, name in enumerate(("Protein", "Carbs", "Fat")):
        change = None
        if previous_percents is not None:
            change = percents[index] - previous_percents[index]
        shares.append(
            MacroShare(
                name=name,
                grams=grams[index],
                calorie_percent=percents[index],
                change_points=change,
            )
        )
    return shares


def nutrition_summary_stats(
    current: Sequence[FoodLogEntry],
    current_days: int,
    previous: Optional[Sequence[FoodLogEntry]] = None,
    previous_days: int = 0,
    goal_calories: Optional[float] = None,
) -> NutritionSummaryStats:
    """Average daily intake for a period, with trends against the previous one.

    Missing averages count as 0 when computing trends. Without a previous
    period every trend is NO_DATA.
    """
    current_avgs = daily_averages(current, current_days)

    net_calories = None
    if goal_calories is not None and current_avgs.avg_calories is not None:
        net_calories = current_avgs.avg_calories - goal_calories

    if previous is None:
        no_data = TrendDelta.no_data()
        changes = (no_data, no_data, no_data, no_data)
    else:
        previous_avgs = daily_averages(previous, previous_days)
        changes = tuple(
            percent_change(getattr(current_avgs, attr) or 0.0, getattr(previous_avgs, attr) or 0.0)
            for attr in ("avg_calories", "avg_protein", "avg_carbs", "avg_fat")
        )

    return NutritionSummaryStats(
        averages=current_avgs,
        avg_daily_net_calories=net_calories,
        goal_calories=goal_calories,
        calories_change=changes[0],
        protein_change=changes[1],
        carbs_change=changes[2],
        fat_change=changes[3],
    )


def calorie_balance(
    entries: Iterable[FoodLogEntry],
    window: DateWindow,
    granularity: Granularity,
    tz: tzinfo,
    goal_calories: Optional[float] = None,
    week_start: int = 0,
) -> list[CalorieBalancePoint]:
    """Calorie intake per day or week across window, next to the goal.

    Weekly buckets compare against seven days of the daily goal.
    """
    points = [(local_date(e.occurred_at, tz), e.calories) for e in entries]
    buckets = bucket_series(points, granularity, span=window, week_start=week_start)

    bucket_goal = goal_calories
    if goal_calories is not None and granularity == Granularity.WEEKLY:
        bucket_goal = goal_calories * 7

    return [
        CalorieBalancePoint(start=b.start, intake=b.total, goal=bucket_goal)
        for b in buckets
    ]
