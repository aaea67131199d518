"""Daily and weekly bucketing for chart series."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional

from fitmetrics.analytics.periods import DateWindow, validate_range

# Ranges short enough to chart day by day
DAILY_RANGES = ("7d", "30d")

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


class Granularity(Enum):
    """Chart bucket size."""

    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class Bucket:
    """Sum and count of the values falling in one bucket."""

    start: date
    total: float
    count: int

    @property
    def mean(self) -> Optional[float]:
        return self.total / self.count if self.count else None


def granularity_for_range(range_key: str) -> Granularity:
    """Daily buckets for 7d/30d, weekly buckets otherwise."""
    validate_range(range_key)
    return Granularity.DAILY if range_key in DAILY_RANGES else Granularity.WEEKLY


def bucket_start(day: date, granularity: Granularity, week_start: int = 0) -> date:
    """First day of the bucket containing day.

    Args:
        day: Calendar date
        granularity: Daily or weekly buckets
        week_start: Weekday weeks start on (0 = Monday ... 6 = Sunday)
    """
    if granularity == Granularity.DAILY:
        return day
    offset = (day.weekday() - week_start) % 7
    return day - timedelta(days=offset)


def bucket_series(
    points: Iterable[tuple[date, float]],
    granularity: Granularity,
    span: Optional[DateWindow] = None,
    week_start: int = 0,
) -> list[Bucket]:
    """Group (day, value) points into contiguous buckets.

    Every bucket between the first and last one is emitted, including
    empty ones (total 0, count 0), so the result can be charted directly.

    Args:
        points: (calendar date, value) pairs in any order
        granularity: Bucket size
        span: Days to cover. Defaults to the first through last point.
        week_start: Weekday weeks start on (0 = Monday)

    Returns:
        Buckets in ascending order; empty if there are no points and no span
    """
    grouped: dict[date, list[float]] = defaultdict(list)
    days: list[date] = []
    for day, value in points:
        grouped[bucket_start(day, granularity, week_start)].append(value)
        days.append(day)

    if span is None:
        if not days:
            return []
        span = DateWindow(min(days), max(days))

    step = timedelta(days=1 if granularity == Granularity.DAILY else 7)
    cursor = bucket_start(span.start, granularity, week_start)
    last = bucket_start(span.end, granularity, week_start)

    buckets = []
    while cursor <= last:
        values = grouped.get(cursor, [])
        buckets.append(Bucket(start=cursor, total=math.fsum(values), count=len(values)))
        cursor += step
    return buckets
