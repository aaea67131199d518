"""Data models for body weight tracking."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from fitmetrics.analytics.trend import TrendDelta
from fitmetrics.errors import InvalidEntryError


@dataclass(frozen=True)
class WeightEntry:
    """A single weigh-in."""

    weight_kg: float
    recorded_at: datetime
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.recorded_at, datetime):
            raise InvalidEntryError(
                f"recorded_at must be a datetime, got {type(self.recorded_at).__name__}"
            )
        if self.weight_kg is None or not math.isfinite(self.weight_kg) or self.weight_kg <= 0:
            raise InvalidEntryError(f"weight_kg must be positive, got {self.weight_kg}")


@dataclass(frozen=True)
class AnnotatedWeightEntry:
    """A weigh-in with BMI and the change from the previous weigh-in."""

    entry: WeightEntry
    bmi: Optional[float]  # None without a usable height
    change_from_last: Optional[float]  # None for the first entry

    @property
    def weight_kg(self) -> float:
        return self.entry.weight_kg

    @property
    def recorded_at(self) -> datetime:
        return self.entry.recorded_at

    @property
    def notes(self) -> Optional[str]:
        return self.entry.notes


@dataclass(frozen=True)
class WeightSummaryStats:
    """Weight dashboard summary for a period."""

    starting_weight: Optional[float]  # From the user profile
    current_weight: Optional[float]  # Last weigh-in in the period
    total_change_kg: Optional[float]  # current - starting
    bmi: Optional[float]
    weight_change: TrendDelta
    bmi_change: TrendDelta


@dataclass(frozen=True)
class WeightTrendPoint:
    """Average weight and BMI for one chart bucket."""

    start: date
    weight: Optional[float]  # None for buckets without weigh-ins
    bmi: Optional[float]
    entry_count: int
