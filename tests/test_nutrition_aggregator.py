"""Tests for nutrition aggregation."""

from __future__ import annotations

import itertools
from datetime import date

import pytest

from fitmetrics.analytics.periods import DateWindow
from fitmetrics.analytics.timeseries import Granularity
from fitmetrics.errors import InvalidEntryError
from fitmetrics.nutrition.aggregator import (
    aggregate_consumption,
    build_summary,
    calorie_balance,
    daily_averages,
    macro_distribution,
    nutrition_summary_stats,
)
from fitmetrics.nutrition.models import (
    ConsumedNutrients,
    FoodLogEntry,
    MealType,
    NutritionTargets,
)

UTC_DAY = (2025, 1, 6)


class TestFoodLogEntry:
    """Validation of food entries."""

    def test_negative_nutrient_raises(self, at) -> None:
        with pytest.raises(InvalidEntryError, match="protein_g"):
            FoodLogEntry(100, -1, 10, 5, at(*UTC_DAY), MealType.SNACK)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_nutrient_raises(self, at, value: float) -> None:
        with pytest.raises(InvalidEntryError, match="calories"):
            FoodLogEntry(value, 1, 10, 5, at(*UTC_DAY), MealType.SNACK)

    def test_timestamp_must_be_datetime(self) -> None:
        with pytest.raises(InvalidEntryError, match="occurred_at"):
            FoodLogEntry(100, 1, 10, 5, "2025-01-06", MealType.SNACK)  # type: ignore[arg-type]


class TestAggregateConsumption:
    """Tests for aggregate_consumption."""

    def test_empty(self) -> None:
        assert aggregate_consumption([]) == ConsumedNutrients(0.0, 0.0, 0.0, 0.0)

    def test_sums(self, make_meal) -> None:
        entries = [
            make_meal(UTC_DAY, calories=500, protein_g=30, carbs_g=50, fat_g=15),
            make_meal(UTC_DAY, calories=250.5, protein_g=10, carbs_g=20.5, fat_g=8),
        ]
        consumed = aggregate_consumption(entries)
        assert consumed.consumed_calories == pytest.approx(750.5)
        assert consumed.consumed_protein == pytest.approx(40)
        assert consumed.consumed_carbs == pytest.approx(70.5)
        assert consumed.consumed_fat == pytest.approx(23)

    def test_order_independent(self, make_meal) -> None:
        """Every permutation gives identical totals, not just approximately equal."""
        entries = [
            make_meal(UTC_DAY, calories=0.1, protein_g=0.1),
            make_meal(UTC_DAY, calories=0.2, protein_g=1e16),
            make_meal(UTC_DAY, calories=0.3, protein_g=1.0),
            make_meal(UTC_DAY, calories=1e-3, protein_g=0.7),
        ]
        results = {aggregate_consumption(p) for p in itertools.permutations(entries)}
        assert len(results) == 1

    def test_does_not_filter(self, make_meal) -> None:
        """Entries from any day or meal are all counted."""
        entries = [
            make_meal((2025, 1, 1), meal_type=MealType.BREAKFAST),
            make_meal((2025, 3, 1), meal_type=MealType.SNACK),
        ]
        assert aggregate_consumption(entries).consumed_calories == pytest.approx(1000)

    def test_build_summary(self, make_meal) -> None:
        targets = NutritionTargets(2000, 150, 200, 70)
        consumed = aggregate_consumption([make_meal(UTC_DAY)])
        summary = build_summary(targets, consumed)
        assert summary.targets is targets
        assert summary.consumed is consumed


class TestDailyAverages:
    """Tests for daily_averages."""

    def test_spread_over_period(self, make_meal) -> None:
        entries = [make_meal((2025, 1, 6), calories=1400), make_meal((2025, 1, 7), calories=700)]
        avgs = daily_averages(entries, 7)
        assert avgs.avg_calories == pytest.approx(300)

    def test_zero_days(self, make_meal) -> None:
        avgs = daily_averages([make_meal(UTC_DAY)], 0)
        assert avgs.avg_calories is None
        assert avgs.avg_fat is None


class TestMacroDistribution:
    """Tests for macro_distribution."""

    def test_percents_sum_to_100(self, make_meal) -> None:
        """400 + 800 + 450 kcal: 24.2/48.5/27.3 rounds to 99, carbs take the extra point."""
        shares = macro_distribution([make_meal(UTC_DAY, protein_g=100, carbs_g=200, fat_g=50)])
        assert [s.name for s in shares] == ["Protein", "Carbs", "Fat"]
        assert [s.calorie_percent for s in shares] == [24, 49, 27]
        assert sum(s.calorie_percent for s in shares) == 100

    def test_no_previous_has_no_change(self, make_meal) -> None:
        shares = macro_distribution([make_meal(UTC_DAY)])
        assert all(s.change_points is None for s in shares)

    def test_change_in_points(self, make_meal) -> None:
        current = [make_meal(UTC_DAY, protein_g=100, carbs_g=100, fat_g=0)]
        previous = [make_meal(UTC_DAY, protein_g=0, carbs_g=100, fat_g=0)]
        shares = macro_distribution(current, previous)
        assert [s.change_points for s in shares] == [50, -50, 0]

    def test_empty_previous_counts_as_zero(self, make_meal) -> None:
        shares = macro_distribution([make_meal(UTC_DAY, protein_g=50, carbs_g=50, fat_g=0)], [])
        assert [s.change_points for s in shares] == [50, 50, 0]

    def test_no_macro_calories(self, make_meal) -> None:
        assert macro_distribution([make_meal(UTC_DAY, protein_g=0, carbs_g=0, fat_g=0)]) == []


class TestNutritionSummaryStats:
    """Tests for nutrition_summary_stats."""

    def test_trends_and_net(self, make_meal) -> None:
        current = [make_meal(UTC_DAY, calories=14000, protein_g=700)]
        previous = [make_meal((2024, 12, 31), calories=7000, protein_g=700)]
        stats = nutrition_summary_stats(current, 7, previous, 7, goal_calories=2200)
        assert stats.averages.avg_calories == pytest.approx(2000)
        assert stats.avg_daily_net_calories == pytest.approx(-200)
        assert stats.calories_change.value == pytest.approx(100)
        assert stats.protein_change.value == pytest.approx(0)

    def test_without_previous(self, make_meal) -> None:
        stats = nutrition_summary_stats([make_meal(UTC_DAY)], 7)
        assert stats.calories_change.is_no_data
        assert stats.avg_daily_net_calories is None

    def test_empty_previous_is_unbounded(self, make_meal) -> None:
        stats = nutrition_summary_stats([make_meal(UTC_DAY)], 7, [], 7)
        assert stats.calories_change.is_unbounded


class TestCalorieBalance:
    """Tests for calorie_balance."""

    def test_daily(self, make_meal, at) -> None:
        window = DateWindow(date(2025, 1, 6), date(2025, 1, 8))
        entries = [make_meal((2025, 1, 6), calories=1800), make_meal((2025, 1, 8), calories=2100)]
        points = calorie_balance(entries, window, Granularity.DAILY, at(2025, 1, 1).tzinfo, 2000)
        assert [(p.start, p.intake, p.goal) for p in points] == [
            (date(2025, 1, 6), 1800, 2000),
            (date(2025, 1, 7), 0, 2000),
            (date(2025, 1, 8), 2100, 2000),
        ]

    def test_weekly_goal_is_seven_days(self, make_meal, at) -> None:
        window = DateWindow(date(2025, 1, 6), date(2025, 1, 19))
        points = calorie_balance(
            [make_meal((2025, 1, 7))], window, Granularity.WEEKLY, at(2025, 1, 1).tzinfo, 2000
        )
        assert [p.start for p in points] == [date(2025, 1, 6), date(2025, 1, 13)]
        assert all(p.goal == 14000 for p in points)
