"""Period-over-period trend deltas.

A percent change between two periods has three distinct outcomes:

- a finite percentage,
- no data (both periods are zero, so there is no trend), or
- an unbounded change away from a zero baseline, with a sign.

TrendDelta carries that outcome explicitly instead of leaning on float
infinity, so "N/A" and "∞%" stay distinguishable after serialization.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from fitmetrics.analytics.periods import DateWindow
from fitmetrics.errors import InvalidEntryError

T = TypeVar("T")


class TrendKind(Enum):
    """Outcome of a percent change computation."""

    VALUE = "value"
    NO_DATA = "no_data"
    UNBOUNDED = "unbounded"


@dataclass(frozen=True)
class TrendDelta:
    """Tagged percent change result."""

    kind: TrendKind
    value: Optional[float] = None  # Percent, only for VALUE
    sign: int = 0  # +1 or -1, only for UNBOUNDED

    def __post_init__(self) -> None:
        if self.kind == TrendKind.VALUE:
            if self.value is None or not math.isfinite(self.value):
                raise ValueError("VALUE trend needs a finite value")
        elif self.value is not None:
            raise ValueError(f"{self.kind.value} trend cannot carry a value")
        if self.kind == TrendKind.UNBOUNDED:
            if self.sign not in (1, -1):
                raise ValueError(f"UNBOUNDED trend needs sign +1 or -1, got {self.sign}")
        elif self.sign != 0:
            raise ValueError(f"{self.kind.value} trend cannot carry a sign")

    @classmethod
    def of(cls, value: float) -> TrendDelta:
        return cls(TrendKind.VALUE, value=float(value))

    @classmethod
    def no_data(cls) -> TrendDelta:
        return cls(TrendKind.NO_DATA)

    @classmethod
    def unbounded(cls, sign: int) -> TrendDelta:
        return cls(TrendKind.UNBOUNDED, sign=sign)

    @property
    def is_value(self) -> bool:
        return self.kind == TrendKind.VALUE

    @property
    def is_no_data(self) -> bool:
        return self.kind == TrendKind.NO_DATA

    @property
    def is_unbounded(self) -> bool:
        return self.kind == TrendKind.UNBOUNDED

    def as_float(self) -> Optional[float]:
        """Collapse to None, +/-inf or the percentage."""
        if self.kind == TrendKind.NO_DATA:
            return None
        if self.kind == TrendKind.UNBOUNDED:
            return math.copysign(math.inf, self.sign)
        return self.value

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation (no inf/NaN)."""
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.kind == TrendKind.VALUE:
            data["value"] = self.value
        elif self.kind == TrendKind.UNBOUNDED:
            data["sign"] = self.sign
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrendDelta:
        """Inverse of to_dict."""
        kind = TrendKind(data["kind"])
        if kind == TrendKind.VALUE:
            return cls.of(data["value"])
        if kind == TrendKind.UNBOUNDED:
            return cls.unbounded(int(data["sign"]))
        return cls.no_data()


def percent_change(current: float, previous: float) -> TrendDelta:
    """Percent change from previous to current.

    - previous == 0 and current == 0: NO_DATA
    - previous == 0 and current != 0: UNBOUNDED with the sign of current
    - otherwise: (current - previous) / previous * 100

    Raises:
        InvalidEntryError: If either value is NaN
    """
    if math.isnan(current) or math.isnan(previous):
        raise InvalidEntryError("percent_change received NaN")

    if previous == 0:
        if current == 0:
            return TrendDelta.no_data()
        return TrendDelta.unbounded(1 if current > 0 else -1)

    return TrendDelta.of((current - previous) / previous * 100)


@dataclass(frozen=True)
class PeriodStats(Generic[T]):
    """Aggregates for a current period and the period right before it.

    When windows are given they must be the same length, and the previous
    window must end the day before the current one starts.
    """

    current: T
    previous: T
    current_window: Optional[DateWindow] = None
    previous_window: Optional[DateWindow] = None

    def __post_init__(self) -> None:
        if self.current_window is None or self.previous_window is None:
            return
        if self.current_window.days != self.previous_window.days:
            raise InvalidEntryError(
                f"Periods differ in length: {self.previous_window.days} "
                f"vs {self.current_window.days} days"
            )
        if self.previous_window != self.current_window.preceding():
            raise InvalidEntryError(
                "Previous period must end the day before the current period starts"
            )

    def delta(self, metric: Callable[[T], float]) -> TrendDelta:
        """Percent change of metric(current) against metric(previous)."""
        return percent_change(metric(self.current), metric(self.previous))
