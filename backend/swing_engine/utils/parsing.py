"""Lenient numeric parsing for provider payload values.

Alpha Vantage returns every number as a string and uses "None", "-" or an
empty string for missing values.
"""

from __future__ import annotations

import math
from typing import Any


def to_float(value: Any, default: float = 0.0) -> float:
    """Parse *value* as a finite float, falling back to *default*."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def to_optional_float(value: Any) -> float | None:
    """Like :func:`to_float` but returns ``None`` for unparseable input."""
    number = to_float(value, default=math.nan)
    return None if math.isnan(number) else number


def to_int(value: Any, default: int = 0) -> int:
    """Parse an integer count (e.g. open interest), tolerating "12.0"."""
    return int(to_float(value, default=float(default)))
