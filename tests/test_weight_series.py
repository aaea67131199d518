"""Tests for weight series annotation, summaries and trends."""

from __future__ import annotations

from datetime import date, timezone

import pytest

from fitmetrics.analytics.periods import DateWindow
from fitmetrics.analytics.timeseries import Granularity
from fitmetrics.errors import InvalidEntryError
from fitmetrics.tracking.models import WeightEntry
from fitmetrics.tracking.weight_series import (
    annotate_weight_series,
    summarize_weight,
    weight_trend,
)


class TestWeightEntry:
    """Validation of weigh-ins."""

    @pytest.mark.parametrize("weight", [0, -70, float("nan"), float("inf")])
    def test_invalid_weight_raises(self, at, weight: float) -> None:
        with pytest.raises(InvalidEntryError):
            WeightEntry(weight_kg=weight, recorded_at=at(2025, 1, 6))

    def test_error_is_value_error(self, at) -> None:
        with pytest.raises(ValueError):
            WeightEntry(weight_kg=0, recorded_at=at(2025, 1, 6))


class TestAnnotateWeightSeries:
    """Tests for annotate_weight_series."""

    def test_empty(self) -> None:
        assert annotate_weight_series([], 180) == []

    def test_single_entry_has_no_change(self, make_weight) -> None:
        (entry,) = annotate_weight_series([make_weight((2025, 1, 6), 80)], 180)
        assert entry.change_from_last is None
        assert entry.bmi == pytest.approx(80 / 1.8**2)

    def test_change_from_last(self, make_weight) -> None:
        entries = [make_weight((2025, 1, 6), 80), make_weight((2025, 1, 7), 78)]
        result = annotate_weight_series(entries, 180)
        assert [e.change_from_last for e in result] == [None, pytest.approx(-2.0)]

    def test_sorts_out_of_order_input(self, make_weight) -> None:
        entries = [
            make_weight((2025, 1, 8), 79),
            make_weight((2025, 1, 6), 81),
            make_weight((2025, 1, 7), 80),
        ]
        result = annotate_weight_series(entries, 180)
        assert [e.weight_kg for e in result] == [81, 80, 79]
        assert [e.change_from_last for e in result] == [
            None,
            pytest.approx(-1.0),
            pytest.approx(-1.0),
        ]

    def test_does_not_mutate_input(self, make_weight) -> None:
        entries = [make_weight((2025, 1, 8), 79), make_weight((2025, 1, 6), 81)]
        snapshot = list(entries)
        annotate_weight_series(entries, 180)
        assert entries == snapshot

    def test_equal_timestamps_keep_input_order(self, make_weight) -> None:
        """Ties stay in input order; the delta is against the preceding element."""
        entries = [make_weight((2025, 1, 6), 80), make_weight((2025, 1, 6), 80.4)]
        result = annotate_weight_series(entries, 180)
        assert [e.weight_kg for e in result] == [80, 80.4]
        assert result[1].change_from_last == pytest.approx(0.4)

    @pytest.mark.parametrize("height", [None, 0, -180])
    def test_bmi_none_without_height(self, make_weight, height) -> None:
        (entry,) = annotate_weight_series([make_weight((2025, 1, 6), 80)], height)
        assert entry.bmi is None
        assert entry.change_from_last is None


class TestSummarizeWeight:
    """Tests for summarize_weight."""

    def test_uses_last_entry_and_starting_weight(self, make_weight) -> None:
        current = [make_weight((2025, 1, 12), 79.5), make_weight((2025, 1, 6), 80)]
        previous = [make_weight((2025, 1, 3), 81)]
        stats = summarize_weight(current, previous, 180, starting_weight_kg=84)
        assert stats.current_weight == 79.5
        assert stats.total_change_kg == pytest.approx(-4.5)
        assert stats.weight_change.value == pytest.approx((79.5 - 81) / 81 * 100)
        assert stats.bmi_change.value == pytest.approx((79.5 - 81) / 81 * 100)

    def test_no_previous_period(self, make_weight) -> None:
        stats = summarize_weight([make_weight((2025, 1, 6), 80)], None, 180)
        assert stats.weight_change.is_no_data
        assert stats.total_change_kg is None

    def test_empty_previous_period_is_unbounded(self, make_weight) -> None:
        stats = summarize_weight([make_weight((2025, 1, 6), 80)], [], 180)
        assert stats.weight_change.is_unbounded
        assert stats.weight_change.sign == 1

    def test_both_empty(self) -> None:
        stats = summarize_weight([], [], 180)
        assert stats.current_weight is None
        assert stats.bmi is None
        assert stats.weight_change.is_no_data

    def test_without_height_bmi_trend_has_no_data(self, make_weight) -> None:
        stats = summarize_weight([make_weight((2025, 1, 6), 80)], [make_weight((2025, 1, 1), 81)], None)
        assert stats.bmi is None
        assert stats.bmi_change.is_no_data


class TestWeightTrend:
    """Tests for weight_trend."""

    def test_daily_with_gaps(self, make_weight) -> None:
        entries = [
            make_weight((2025, 1, 6), 80),
            make_weight((2025, 1, 6), 81, hour=20),
            make_weight((2025, 1, 8), 79),
        ]
        points = weight_trend(entries, 180, Granularity.DAILY, timezone.utc)
        assert [p.start for p in points] == [date(2025, 1, 6), date(2025, 1, 7), date(2025, 1, 8)]
        assert points[0].weight == pytest.approx(80.5)
        assert points[0].entry_count == 2
        assert points[1].weight is None
        assert points[1].bmi is None

    def test_weekly_span(self, make_weight) -> None:
        span = DateWindow(date(2025, 1, 6), date(2025, 1, 19))
        points = weight_trend(
            [make_weight((2025, 1, 15), 79)], 180, Granularity.WEEKLY, timezone.utc, span=span
        )
        assert [p.start for p in points] == [date(2025, 1, 6), date(2025, 1, 13)]
        assert points[0].weight is None
        assert points[1].weight == 79
