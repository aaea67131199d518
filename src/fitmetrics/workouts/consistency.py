"""Workout consistency: streaks and active-day counts.

A streak is a run of consecutive calendar days that each have at least one
workout. Everything here works on integer day indices (days since
1970-01-01), so time zones only matter when timestamps are first turned
into days.

The current streak ends on the most recent active day in the window, not
on the window's end date. A rest day at the end of the window therefore
does not reset the current streak to zero; the streak just stops growing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Iterable, Optional

from fitmetrics.analytics.periods import (
    DateWindow,
    day_index_from_timestamp,
    from_day_index,
    to_day_index,
)
from fitmetrics.errors import InvalidEntryError
from fitmetrics.workouts.models import WorkoutEntry


@dataclass(frozen=True)
class ConsistencyWindow:
    """Days with at least one workout, plus the window to evaluate.

    workout_days may contain days outside [start, end]; they are ignored.
    """

    workout_days: frozenset[int]
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidEntryError(
                f"Window start {from_day_index(self.start)} is after its end "
                f"{from_day_index(self.end)}"
            )

    @classmethod
    def from_dates(cls, dates: Iterable[date], start: date, end: date) -> ConsistencyWindow:
        return cls(
            workout_days=frozenset(to_day_index(d) for d in dates),
            start=to_day_index(start),
            end=to_day_index(end),
        )

    @classmethod
    def from_workouts(
        cls,
        entries: Iterable[WorkoutEntry],
        window: DateWindow,
        tz: tzinfo,
    ) -> ConsistencyWindow:
        """Build from logged workouts, converting timestamps in zone tz."""
        return cls(
            workout_days=frozenset(day_index_from_timestamp(e.occurred_at, tz) for e in entries),
            start=to_day_index(window.start),
            end=to_day_index(window.end),
        )

    def active_days(self) -> list[int]:
        """Workout days inside the window, ascending."""
        return sorted(d for d in self.workout_days if self.start <= d <= self.end)

    @property
    def total_days(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class ConsistencyReport:
    """Streak and adherence metrics for a window."""

    current_streak: int
    longest_streak: int
    workout_days_count: int
    total_days_in_range: int
    avg_days_per_week: Optional[float]
    longest_run: Optional[tuple[date, date]]  # First longest run, chronologically
    last_active_day: Optional[date]


def longest_run(active_days: list[int]) -> Optional[tuple[int, int]]:
    """First maximal run of consecutive days in an ascending list.

    Returns:
        (first day, last day) of the run, or None for an empty list. When
        several runs share the maximum length the earliest one wins.
    """
    if not active_days:
        return None

    best_start = run_start = active_days[0]
    best_length = run_length = 1
    for previous, day in zip(active_days, active_days[1:]):
        if day == previous + 1:
            run_length += 1
        else:
            run_start = day
            run_length = 1
        if run_length > best_length:
            best_start, best_length = run_start, run_length

    return best_start, best_start + best_length - 1


def current_streak(active_days: list[int]) -> int:
    """Length of the run ending on the last day of an ascending list."""
    if not active_days:
        return 0

    streak = 1
    for index in range(len(active_days) - 1, 0, -1):
        if active_days[index - 1] != active_days[index] - 1:
            break
        streak += 1
    return streak


def compute_consistency(window: ConsistencyWindow) -> ConsistencyReport:
    """Compute streaks and active-day counts for a window.

    Example:
        Workouts Mon, Tue, Wed, Fri, Sat, Sun in a window ending Sunday:
        current_streak 3 (Fri-Sun), longest_streak 3 (Mon-Wed, found
        first), workout_days_count 6.
    """
    active = window.active_days()
    total_days = window.total_days

    run = longest_run(active)
    longest = run[1] - run[0] + 1 if run else 0

    return ConsistencyReport(
        current_streak=current_streak(active),
        longest_streak=longest,
        workout_days_count=len(active),
        total_days_in_range=total_days,
        avg_days_per_week=len(active) / total_days * 7 if total_days > 0 else None,
        longest_run=(from_day_index(run[0]), from_day_index(run[1])) if run else None,
        last_active_day=from_day_index(active[-1]) if active else None,
    )
