"""Tests for percent change and period comparison."""

from __future__ import annotations

import math
from datetime import date

import pytest

from fitmetrics.analytics.periods import DateWindow
from fitmetrics.analytics.trend import PeriodStats, TrendDelta, TrendKind, percent_change
from fitmetrics.errors import InvalidEntryError


class TestPercentChange:
    """Tests for the three-way percent change."""

    def test_both_zero_is_no_data(self) -> None:
        assert percent_change(0, 0).kind == TrendKind.NO_DATA

    def test_from_zero_is_unbounded_up(self) -> None:
        delta = percent_change(5, 0)
        assert delta.is_unbounded
        assert delta.sign == 1
        assert delta.as_float() == math.inf

    def test_negative_from_zero_is_unbounded_down(self) -> None:
        delta = percent_change(-5, 0)
        assert delta.sign == -1
        assert delta.as_float() == -math.inf

    def test_increase(self) -> None:
        delta = percent_change(150, 100)
        assert delta.is_value
        assert delta.value == pytest.approx(50.0)

    def test_decrease(self) -> None:
        assert percent_change(50, 100).value == pytest.approx(-50.0)

    def test_drop_to_zero(self) -> None:
        assert percent_change(0, 80).value == pytest.approx(-100.0)

    def test_not_rounded(self) -> None:
        assert percent_change(1, 3).value == pytest.approx(-66.6666667)

    def test_nan_raises(self) -> None:
        with pytest.raises(InvalidEntryError):
            percent_change(float("nan"), 1)


class TestTrendDelta:
    """Tests for TrendDelta construction and serialization."""

    def test_no_data_as_float(self) -> None:
        assert TrendDelta.no_data().as_float() is None

    @pytest.mark.parametrize(
        "delta",
        [TrendDelta.of(12.5), TrendDelta.no_data(), TrendDelta.unbounded(-1)],
    )
    def test_dict_round_trip(self, delta: TrendDelta) -> None:
        assert TrendDelta.from_dict(delta.to_dict()) == delta

    def test_to_dict_has_no_infinity(self) -> None:
        assert TrendDelta.unbounded(1).to_dict() == {"kind": "unbounded", "sign": 1}

    def test_value_requires_finite(self) -> None:
        with pytest.raises(ValueError):
            TrendDelta(TrendKind.VALUE, value=math.inf)

    def test_unbounded_requires_sign(self) -> None:
        with pytest.raises(ValueError):
            TrendDelta(TrendKind.UNBOUNDED)


class TestPeriodStats:
    """Tests for PeriodStats window validation."""

    def test_adjacent_windows(self) -> None:
        current = DateWindow(date(2025, 1, 6), date(2025, 1, 12))
        stats = PeriodStats(10, 5, current, current.preceding())
        assert stats.delta(lambda v: v).value == pytest.approx(100.0)

    def test_unequal_length_raises(self) -> None:
        with pytest.raises(InvalidEntryError, match="differ in length"):
            PeriodStats(
                1,
                1,
                DateWindow(date(2025, 1, 6), date(2025, 1, 12)),
                DateWindow(date(2025, 1, 1), date(2025, 1, 5)),
            )

    def test_overlapping_windows_raise(self) -> None:
        with pytest.raises(InvalidEntryError):
            PeriodStats(
                1,
                1,
                DateWindow(date(2025, 1, 6), date(2025, 1, 12)),
                DateWindow(date(2025, 1, 1), date(2025, 1, 7)),
            )

    def test_without_windows(self) -> None:
        assert PeriodStats(0, 0).delta(float).is_no_data
