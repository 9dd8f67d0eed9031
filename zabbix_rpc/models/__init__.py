"""Data models for the Zabbix JSON-RPC client."""

from .config import (
    DEFAULT_API_PATH,
    ContentLevel,
    Connection,
    ClientOptions,
    TagFilter
)

from .enums import (
    Severity,
    EvalType,
    TagOperator,
    EventSource,
    EventObject,
    HistoryValueType
)

from .responses import (
    Instant,
    TimeSeries
)

__all__ = [
    # Configuration models
    'DEFAULT_API_PATH',
    'ContentLevel',
    'Connection',
    'ClientOptions',
    'TagFilter',

    # Enumerations
    'Severity',
    'EvalType',
    'TagOperator',
    'EventSource',
    'EventObject',
    'HistoryValueType',

    # Response models
    'Instant',
    'TimeSeries'
]
