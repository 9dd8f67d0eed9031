"""Symbolic enumerations and their Zabbix wire ids.

Each table is closed: lookups of an unknown symbol return ``None`` so the
parameter is left out of the request, they never fall back to 0.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar


E = TypeVar("E", bound=Enum)


class Severity(str, Enum):
    """Enumeration of trigger / event severities."""
    NOT_CLASSIFIED = "not-classified"
    INFORMATION = "information"
    WARNING = "warning"
    AVERAGE = "average"
    HIGH = "high"
    DISASTER = "disaster"


class EvalType(str, Enum):
    """Enumeration of tag evaluation methods."""
    AND_OR = "and-or"
    OR = "or"


class TagOperator(str, Enum):
    """Enumeration of tag filter comparison operators."""
    LIKE = "like"
    EQUAL = "equal"


class EventSource(str, Enum):
    """Enumeration of event sources."""
    TRIGGER = "trigger"
    DISCOVERY_RULE = "discovery-rule"
    AGENT_AUTOREGISTRATION = "agent-autoregistration"
    INTERNAL = "internal"


class EventObject(str, Enum):
    """Enumeration of event object kinds, only meaningful together with a source."""
    TRIGGER = "trigger"
    DISCOVERED_HOST = "discovered-host"
    DISCOVERED_SERVICE = "discovered-service"
    AUTOREGISTERED_HOST = "autoregistered-host"
    ITEM = "item"
    LLD_RULE = "lld-rule"


class HistoryValueType(str, Enum):
    """Enumeration of history value kinds."""
    FLOAT = "float"
    CHAR = "char"
    LOG = "log"
    UNSIGNED = "unsigned"
    TEXT = "text"


SEVERITY_IDS: Dict[Severity, int] = {
    Severity.NOT_CLASSIFIED: 0,
    Severity.INFORMATION: 1,
    Severity.WARNING: 2,
    Severity.AVERAGE: 3,
    Severity.HIGH: 4,
    Severity.DISASTER: 5,
}

# 1 is not a valid evaltype on the wire.
EVAL_TYPE_IDS: Dict[EvalType, int] = {
    EvalType.AND_OR: 0,
    EvalType.OR: 2,
}

TAG_OPERATOR_IDS: Dict[TagOperator, int] = {
    TagOperator.LIKE: 0,
    TagOperator.EQUAL: 2,
}

EVENT_SOURCE_IDS: Dict[EventSource, int] = {
    EventSource.TRIGGER: 0,
    EventSource.DISCOVERY_RULE: 1,
    EventSource.AGENT_AUTOREGISTRATION: 2,
    EventSource.INTERNAL: 3,
}

# Object ids overlap across sources (trigger is 0 for both TRIGGER and INTERNAL).
EVENT_OBJECT_IDS: Dict[EventSource, Dict[EventObject, int]] = {
    EventSource.TRIGGER: {
        EventObject.TRIGGER: 0,
    },
    EventSource.DISCOVERY_RULE: {
        EventObject.DISCOVERED_HOST: 1,
        EventObject.DISCOVERED_SERVICE: 2,
    },
    EventSource.AGENT_AUTOREGISTRATION: {
        EventObject.AUTOREGISTERED_HOST: 3,
    },
    EventSource.INTERNAL: {
        EventObject.TRIGGER: 0,
        EventObject.ITEM: 4,
        EventObject.LLD_RULE: 5,
    },
}

HISTORY_VALUE_TYPE_IDS: Dict[HistoryValueType, int] = {
    HistoryValueType.FLOAT: 0,
    HistoryValueType.CHAR: 1,
    HistoryValueType.LOG: 2,
    HistoryValueType.UNSIGNED: 3,
    HistoryValueType.TEXT: 4,
}


def as_member(enum_cls: Type[E], value: Any) -> Optional[E]:
    """Resolve ``value`` to a member of ``enum_cls``, or ``None``.

    Accepts a member, its symbolic value (``"not-classified"``) or its
    Python name in any case (``"NOT_CLASSIFIED"``, ``"not_classified"``).
    """
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        pass
    return enum_cls.__members__.get(value.upper().replace("-", "_"))


def _to_id(table: Mapping[E, int], enum_cls: Type[E], value: Any) -> Optional[int]:
    member = as_member(enum_cls, value)
    if member is None:
        return None
    return table.get(member)


def _from_id(table: Mapping[E, int], wire_id: Any) -> Optional[E]:
    for member, member_id in table.items():
        if member_id == wire_id:
            return member
    return None


def severity_to_id(severity: Any) -> Optional[int]:
    return _to_id(SEVERITY_IDS, Severity, severity)


def severity_from_id(wire_id: int) -> Optional[Severity]:
    return _from_id(SEVERITY_IDS, wire_id)


def eval_type_to_id(eval_type: Any) -> Optional[int]:
    return _to_id(EVAL_TYPE_IDS, EvalType, eval_type)


def eval_type_from_id(wire_id: int) -> Optional[EvalType]:
    return _from_id(EVAL_TYPE_IDS, wire_id)


def tag_operator_to_id(operator: Any) -> Optional[int]:
    return _to_id(TAG_OPERATOR_IDS, TagOperator, operator)


def tag_operator_from_id(wire_id: int) -> Optional[TagOperator]:
    return _from_id(TAG_OPERATOR_IDS, wire_id)


def event_source_to_id(source: Any) -> Optional[int]:
    return _to_id(EVENT_SOURCE_IDS, EventSource, source)


def event_source_from_id(wire_id: int) -> Optional[EventSource]:
    return _from_id(EVENT_SOURCE_IDS, wire_id)


def event_object_to_id(source: Any, event_object: Any) -> Optional[int]:
    """Look up an object id in the table of its source.

    Both keys are needed: the same object kind can map to the same id under
    different sources, and an object outside its source's table is unknown.
    """
    source_member = as_member(EventSource, source)
    if source_member is None:
        return None
    return _to_id(EVENT_OBJECT_IDS[source_member], EventObject, event_object)


def event_object_from_id(source: Any, wire_id: int) -> Optional[EventObject]:
    source_member = as_member(EventSource, source)
    if source_member is None:
        return None
    return _from_id(EVENT_OBJECT_IDS[source_member], wire_id)


def history_value_type_to_id(value_type: Any) -> Optional[int]:
    return _to_id(HISTORY_VALUE_TYPE_IDS, HistoryValueType, value_type)


def history_value_type_from_id(wire_id: int) -> Optional[HistoryValueType]:
    return _from_id(HISTORY_VALUE_TYPE_IDS, wire_id)
