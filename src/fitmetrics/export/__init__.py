"""Output formatting for dashboard values."""

from fitmetrics.export.formatters import (
    TableFormatter,
    format_duration,
    format_optional,
    format_trend,
    format_workout_type_label,
)
from fitmetrics.export.serialization import to_jsonable

__all__ = [
    "TableFormatter",
    "format_duration",
    "format_optional",
    "format_trend",
    "format_workout_type_label",
    "to_jsonable",
]
