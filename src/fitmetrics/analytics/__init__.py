"""Progress analytics: trend deltas, period windows and time series."""

from __future__ import annotations

from fitmetrics.analytics.periods import (
    DateWindow,
    PeriodWindows,
    day_index_from_timestamp,
    from_day_index,
    local_date,
    period_windows,
    to_day_index,
)
from fitmetrics.analytics.timeseries import Bucket, Granularity, bucket_series
from fitmetrics.analytics.trend import (
    PeriodStats,
    TrendDelta,
    TrendKind,
    percent_change,
)

__all__ = [
    "Bucket",
    "DateWindow",
    "Granularity",
    "PeriodStats",
    "PeriodWindows",
    "TrendDelta",
    "TrendKind",
    "bucket_series",
    "day_index_from_timestamp",
    "from_day_index",
    "local_date",
    "percent_change",
    "period_windows",
    "to_day_index",
]
