"""Convert result values into JSON-serializable structures.

Dataclasses become dicts, enums their values and dates ISO strings.
TrendDelta uses its own tagged form, so no infinities reach the JSON.
"""

from __future__ import annotations

import dataclasses
import math
from datetime import date, datetime
from enum import Enum
from typing import Any

from fitmetrics.analytics.trend import TrendDelta


def to_jsonable(value: Any) -> Any:
    """Recursively convert a result value to plain JSON types.

    Raises:
        ValueError: If a float is NaN or infinite
    """
    if isinstance(value, TrendDelta):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value) if isinstance(value, (set, frozenset)) else value
        return [to_jsonable(v) for v in items]
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Cannot serialize non-finite float {value}")
    return value
