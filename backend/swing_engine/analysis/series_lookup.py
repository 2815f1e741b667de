"""Latest-value lookup over the provider's date-keyed series.

Indicator payloads nest their rows under ``"Technical Analysis: <NAME>"``;
the daily price payload nests them under ``"Time Series (Daily)"``. Rows are
keyed by ISO dates, so a descending string sort is most-recent-first.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

DAILY_KEY = "Time Series (Daily)"
TECHNICAL_KEY = "Technical Analysis: {indicator}"

# Fixed-width keys sort lexicographically in chronological order.
_DATE_KEY = re.compile(r"^\d{4}-\d{2}-\d{2}( \d{2}:\d{2}(:\d{2})?)?$")

T = TypeVar("T")


@dataclass(frozen=True)
class LatestTriple(Generic[T]):
    current: T = field(default_factory=dict)
    previous: T = field(default_factory=dict)
    two_ago: T = field(default_factory=dict)


class SeriesLookup:
    """Extracts the most recent observations of a named indicator."""

    def resolve_table(self, payload: Any, indicator: str) -> Mapping:
        """Return the date-keyed table inside *payload*, or an empty one."""
        if not isinstance(payload, Mapping):
            return {}
        technical_key = TECHNICAL_KEY.format(indicator=indicator)
        if technical_key in payload:
            table = payload[technical_key]
        elif DAILY_KEY in payload:
            table = payload[DAILY_KEY]
        else:
            return {}
        if not isinstance(table, Mapping):
            logger.warning(f"Series '{indicator}' is not a date-keyed table: {type(table).__name__}")
            return {}
        return table

    def sorted_dates(self, table: Mapping) -> list[str]:
        """Date keys, most recent first. Keys that are not ISO dates are dropped."""
        dates = []
        for key in table:
            if isinstance(key, str) and _DATE_KEY.match(key):
                dates.append(key)
            else:
                logger.warning(f"Skipping non-ISO date key {key!r}")
        return sorted(dates, reverse=True)

    def recent(self, payload: Any, indicator: str, count: int, record: Optional[type] = None) -> list:
        """The *count* most recent rows, most recent first."""
        table = self.resolve_table(payload, indicator)
        rows = [table[d] for d in self.sorted_dates(table)[:count]]
        if record is not None:
            return [record.parse(row) for row in rows]
        return [row if isinstance(row, Mapping) else {} for row in rows]

    def latest(self, payload: Any, indicator: str, record: Optional[type] = None) -> LatestTriple:
        """Current, previous and two-periods-ago rows of *indicator*.

        Missing positions become an empty row (or a default *record*).
        """
        rows = self.recent(payload, indicator, 3, record)
        while len(rows) < 3:
            rows.append(record.parse({}) if record is not None else {})
        return LatestTriple(current=rows[0], previous=rows[1], two_ago=rows[2])


def latest(payload: Any, indicator: str, record: Optional[type] = None) -> LatestTriple:
    return SeriesLookup().latest(payload, indicator, record)
