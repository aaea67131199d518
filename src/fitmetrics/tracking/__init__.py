"""Body weight tracking.

Turns a user's weigh-ins into a chronological series annotated with BMI
and the change from the previous weigh-in, plus period summaries and
chart buckets.
"""

from __future__ import annotations

from fitmetrics.tracking.models import (
    AnnotatedWeightEntry,
    WeightEntry,
    WeightSummaryStats,
    WeightTrendPoint,
)
from fitmetrics.tracking.weight_series import (
    annotate_weight_series,
    summarize_weight,
    weight_trend,
)

__all__ = [
    "AnnotatedWeightEntry",
    "WeightEntry",
    "WeightSummaryStats",
    "WeightTrendPoint",
    "annotate_weight_series",
    "summarize_weight",
    "weight_trend",
]
