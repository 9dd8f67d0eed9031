"""
Time series helpers: reshape Zabbix ``clock``-stamped rows into a mapping
keyed by instant.

No API calls; used by the response resolver at the ``best`` content level.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterable, Tuple

from .models.responses import Instant, TimeSeries
from .time_utils import TimeParser


CLOCK_FIELD = "clock"
NS_FIELD = "ns"


def looks_like_series(result: Any) -> bool:
    """Whether ``result`` is a non-empty list of rows carrying ``clock``.

    Only the first element is inspected.
    """
    if isinstance(result, (str, bytes, Mapping)) or not isinstance(result, Sequence):
        return False
    if not result:
        return False
    first = result[0]
    return isinstance(first, Mapping) and CLOCK_FIELD in first


def series_entry(row: Mapping[str, Any]) -> Tuple[Instant, Dict[str, Any]]:
    """Split one row into its instant and the remaining fields.

    The row itself is left untouched.
    """
    instant = TimeParser.parse_clock(row.get(CLOCK_FIELD), row.get(NS_FIELD))
    fields = {k: v for k, v in row.items() if k not in (CLOCK_FIELD, NS_FIELD)}
    return instant, fields


def normalize_series(rows: Iterable[Mapping[str, Any]]) -> TimeSeries:
    """Collapse rows into ``{Instant: fields}``.

    Rows sharing the same ``clock``/``ns`` pair land on the same key; the
    last one in iteration order wins and earlier ones are dropped.
    """
    return dict(series_entry(row) for row in rows)
