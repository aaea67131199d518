"""Calendar days, date windows and dashboard period ranges.

Calendar arithmetic works on plain dates and on integer day indices (days
since 1970-01-01). Converting a timestamp to a calendar day needs an
explicit zone: the engine never guesses one, so naive timestamps are
rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Iterable, Optional, TypeVar

from fitmetrics.errors import InvalidEntryError

T = TypeVar("T")

EPOCH = date(1970, 1, 1)

# Fixed period lengths (days) for dashboard ranges
RANGE_DAYS = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "1y": 365,
}

ALL_RANGE = "all"
VALID_RANGES = (*RANGE_DAYS.keys(), ALL_RANGE)


def to_day_index(day: date) -> int:
    """Return the number of days between the epoch and day."""
    return (day - EPOCH).days


def from_day_index(index: int) -> date:
    """Inverse of to_day_index."""
    return EPOCH + timedelta(days=index)


def local_date(timestamp: datetime, tz: tzinfo) -> date:
    """Return the calendar date of a timestamp in the given zone.

    Raises:
        InvalidEntryError: If timestamp is not a timezone-aware datetime
    """
    if not isinstance(timestamp, datetime):
        raise InvalidEntryError(f"Expected a datetime, got {type(timestamp).__name__}")
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        raise InvalidEntryError(
            f"Timestamp {timestamp.isoformat()} has no timezone; "
            "localize it before converting to a calendar day"
        )
    return timestamp.astimezone(tz).date()


def day_index_from_timestamp(timestamp: datetime, tz: tzinfo) -> int:
    """Day index of a timestamp's calendar date in the given zone."""
    return to_day_index(local_date(timestamp, tz))


@dataclass(frozen=True)
class DateWindow:
    """An inclusive range of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidEntryError(
                f"Window start {self.start} is after its end {self.end}"
            )

    @property
    def days(self) -> int:
        """Number of calendar days in the window (inclusive)."""
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def preceding(self) -> DateWindow:
        """The window of the same length ending the day before this one."""
        end = self.start - timedelta(days=1)
        return DateWindow(end - timedelta(days=self.days - 1), end)


@dataclass(frozen=True)
class PeriodWindows:
    """Current and previous comparison windows for a dashboard range.

    Both are None for the 'all' range: the current period is unbounded and
    there is nothing to compare against.
    """

    range_key: str
    current: Optional[DateWindow]
    previous: Optional[DateWindow]


def validate_range(range_key: str) -> str:
    """Return range_key unchanged, or raise ValueError if it is unknown."""
    if range_key not in VALID_RANGES:
        raise ValueError(
            f"Unknown range '{range_key}'. Expected one of: {', '.join(VALID_RANGES)}"
        )
    return range_key


def period_windows(range_key: str, as_of: date) -> PeriodWindows:
    """Build the current and previous windows for a range ending on as_of.

    The current window is the last N days including as_of; the previous
    window has the same length and ends the day before the current one
    starts.

    Example:
        >>> w = period_windows("7d", date(2025, 1, 12))
        >>> (w.current.start, w.current.end)
        (datetime.date(2025, 1, 6), datetime.date(2025, 1, 12))
        >>> (w.previous.start, w.previous.end)
        (datetime.date(2024, 12, 30), datetime.date(2025, 1, 5))
    """
    validate_range(range_key)
    if range_key == ALL_RANGE:
        return PeriodWindows(range_key, None, None)

    days = RANGE_DAYS[range_key]
    current = DateWindow(as_of - timedelta(days=days - 1), as_of)
    return PeriodWindows(range_key, current, current.preceding())


def span_of(days: Iterable[date], end: Optional[date] = None) -> Optional[DateWindow]:
    """Window from the earliest day to end (or the latest day if end is None).

    Returns None when there are no days, or when every day falls after end.
    """
    ordered = sorted(days)
    if not ordered:
        return None
    last = end if end is not None else ordered[-1]
    if ordered[0] > last:
        return None
    return DateWindow(ordered[0], last)


def filter_by_window(
    items: Iterable[T],
    timestamp_of: Callable[[T], datetime],
    window: Optional[DateWindow],
    tz: tzinfo,
) -> list[T]:
    """Keep items whose local calendar date falls inside window.

    A None window is unbounded and keeps everything. Input order is kept.
    """
    if window is None:
        return list(items)
    return [item for item in items if window.contains(local_date(timestamp_of(item), tz))]
