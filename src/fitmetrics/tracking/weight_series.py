"""Weight series processing: BMI and change from the previous weigh-in."""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterable, Optional, Sequence

from fitmetrics.analytics.periods import DateWindow, local_date
from fitmetrics.analytics.timeseries import Granularity, bucket_series
from fitmetrics.analytics.trend import TrendDelta, percent_change
from fitmetrics.profiles.body_calc import compute_bmi
from fitmetrics.tracking.models import (
    AnnotatedWeightEntry,
    WeightEntry,
    WeightSummaryStats,
    WeightTrendPoint,
)


def sort_entries(entries: Iterable[WeightEntry]) -> list[WeightEntry]:
    """Sort ascending by recorded_at; equal timestamps keep input order."""
    return sorted(entries, key=lambda e: e.recorded_at)


def annotate_weight_series(
    entries: Iterable[WeightEntry],
    height_cm: Optional[float],
) -> list[AnnotatedWeightEntry]:
    """Annotate weigh-ins with BMI and change from the previous weigh-in.

    Entries may arrive in any order; they are sorted by recorded_at first.
    The change is taken against the preceding entry in sorted order, even
    when both share a timestamp.

    Args:
        entries: A user's weigh-ins
        height_cm: The user's height, or None if unknown

    Returns:
        Annotated entries in ascending order. The first entry has
        change_from_last None. BMI is None when height is missing or
        non-positive.

    Example:
        80 kg then 78 kg gives change_from_last [None, -2.0].
    """
    annotated = []
    previous: Optional[WeightEntry] = None
    for entry in sort_entries(entries):
        change = entry.weight_kg - previous.weight_kg if previous is not None else None
        annotated.append(
            AnnotatedWeightEntry(
                entry=entry,
                bmi=compute_bmi(entry.weight_kg, height_cm),
                change_from_last=change,
            )
        )
        previous = entry
    return annotated


def latest_entry(entries: Sequence[WeightEntry]) -> Optional[WeightEntry]:
    """Most recent weigh-in (the last of equal timestamps), or None."""
    ordered = sort_entries(entries)
    return ordered[-1] if ordered else None


def summarize_weight(
    current: Sequence[WeightEntry],
    previous: Optional[Sequence[WeightEntry]],
    height_cm: Optional[float],
    starting_weight_kg: Optional[float] = None,
) -> WeightSummaryStats:
    """Summarize weight for a period and compare with the previous period.

    Args:
        current: Weigh-ins in the current period
        previous: Weigh-ins in the previous period, or None for no comparison
        height_cm: User height for BMI
        starting_weight_kg: Weight the user started with (profile value)

    Returns:
        WeightSummaryStats. The period's weight is its last weigh-in. A
        period without weigh-ins counts as 0 in the trend, so a first
        weigh-in after an empty period is an unbounded increase.
    """
    current_last = latest_entry(current)
    current_weight = current_last.weight_kg if current_last else None
    current_bmi = compute_bmi(current_weight, height_cm)

    total_change = None
    if starting_weight_kg is not None and current_weight is not None:
        total_change = current_weight - starting_weight_kg

    if previous is None:
        weight_change = bmi_change = TrendDelta.no_data()
    else:
        previous_last = latest_entry(previous)
        previous_weight = previous_last.weight_kg if previous_last else None
        previous_bmi = compute_bmi(previous_weight, height_cm)
        weight_change = percent_change(current_weight or 0.0, previous_weight or 0.0)
        bmi_change = percent_change(current_bmi or 0.0, previous_bmi or 0.0)

    return WeightSummaryStats(
        starting_weight=starting_weight_kg,
        current_weight=current_weight,
        total_change_kg=total_change,
        bmi=current_bmi,
        weight_change=weight_change,
        bmi_change=bmi_change,
    )


def weight_trend(
    entries: Iterable[WeightEntry],
    height_cm: Optional[float],
    granularity: Granularity,
    tz: tzinfo,
    span: Optional[DateWindow] = None,
    week_start: int = 0,
) -> list[WeightTrendPoint]:
    """Average weight (and its BMI) per day or week.

    Buckets between the first and last weigh-in without any entries get
    weight None, so charts show a gap instead of a drop to zero.
    """
    points = [(local_date(e.recorded_at, tz), e.weight_kg) for e in entries]
    buckets = bucket_series(points, granularity, span=span, week_start=week_start)
    return [
        WeightTrendPoint(
            start=b.start,
            weight=b.mean,
            bmi=compute_bmi(b.mean, height_cm),
            entry_count=b.count,
        )
        for b in buckets
    ]
