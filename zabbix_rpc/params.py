"""Turn keyword arguments into a Zabbix JSON-RPC ``params`` object.

Endpoint operations describe their arguments as a mapping of keyword name
to :class:`Param` (wire key plus coercion). :func:`normalize` applies the
coercions, merges the generic listing options every ``*.get`` method
understands, and finally drops every ``None`` value: an argument that is
absent on the wire means "not specified" to the server.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union

from .exceptions import ValidationError
from .models.config import TagFilter
from .models.enums import (
    TagOperator,
    eval_type_to_id,
    event_source_to_id,
    history_value_type_to_id,
    severity_to_id,
    tag_operator_to_id,
)
from .time_utils import TimeParser


Coercion = Callable[[Any], Any]


# Keyword name -> wire key, accepted on every listing operation
GENERIC_GET_PARAMS: Dict[str, str] = {
    "count_output": "countOutput",
    "editable": "editable",
    "exclude_search": "excludeSearch",
    "filter": "filter",
    "limit": "limit",
    "output": "output",
    "search": "search",
    "search_by_any": "searchByAny",
    "search_wildcards_enabled": "searchWildcardsEnabled",
    "sort_order": "sortorder",
    "start_search": "startSearch",
}

_GENERIC_WIRE_KEYS = frozenset(GENERIC_GET_PARAMS.values())


class Param(NamedTuple):
    """How one keyword argument reaches the wire."""
    wire_key: str
    coerce: Optional[Coercion] = None


def passthrough(value: Any) -> Any:
    return value


def _is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def coerce_ids(ids: Any) -> Union[None, str, Iterable]:
    """Coerce a single id or a collection of ids to their string form.

    ``None`` stays ``None``. A collection becomes a lazy iterator over the
    string form of each element. Anything else, strings included, becomes
    a single string.
    """
    if ids is None:
        return None
    if _is_collection(ids):
        return map(str, ids)
    if isinstance(ids, bytes):
        return ids.decode("utf-8")
    return str(ids)


def coerce_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def coerce_severities(severities: Any) -> Union[None, int, List[int]]:
    """Map one severity or a collection of severities to wire ids.

    Unknown symbols are left out: a single unknown severity yields ``None``,
    unknown members of a collection are skipped.
    """
    if severities is None:
        return None
    if _is_collection(severities):
        ids = (severity_to_id(s) for s in severities)
        return [i for i in ids if i is not None]
    return severity_to_id(severities)


def serialize_tag_filter(tag_filter: Union[TagFilter, Mapping]) -> Dict[str, Any]:
    """Serialize one tag filter to ``{"tag", "value", "operator"}``.

    The operator defaults to ``like`` and is sent as its wire id.
    """
    if isinstance(tag_filter, TagFilter):
        tag, value, operator = tag_filter.tag, tag_filter.value, tag_filter.operator
    elif isinstance(tag_filter, Mapping):
        tag = tag_filter.get("tag")
        value = tag_filter.get("value")
        operator = tag_filter.get("operator")
    else:
        raise ValidationError(
            "Tag filter must be a TagFilter or a mapping",
            field_name="tag_filters",
            field_value=tag_filter
        )
    if operator is None:
        operator = TagOperator.LIKE
    return {
        "tag": tag,
        "value": value,
        "operator": tag_operator_to_id(operator),
    }


def serialize_tag_filters(tag_filters: Any) -> Optional[List[Dict[str, Any]]]:
    if tag_filters is None:
        return None
    if isinstance(tag_filters, (TagFilter, Mapping)):
        tag_filters = [tag_filters]
    return [serialize_tag_filter(tf) for tf in tag_filters]


def parse_generic_get_params(named_args: Mapping[str, Any]) -> Dict[str, Any]:
    """Pick the generic listing options out of ``named_args``.

    Both keyword names (``count_output``) and wire keys (``countOutput``)
    are recognized. ``filter`` is always present, defaulting to ``{}``.
    """
    params: Dict[str, Any] = {}
    for name, value in named_args.items():
        if name in GENERIC_GET_PARAMS:
            params[GENERIC_GET_PARAMS[name]] = value
        elif name in _GENERIC_WIRE_KEYS:
            params[name] = value
    if params.get("filter") is None:
        params["filter"] = {}
    return params


def is_generic_get_param(name: str) -> bool:
    return name in GENERIC_GET_PARAMS or name in _GENERIC_WIRE_KEYS


def remove_nils(coll: Any) -> Any:
    """Return a copy of ``coll`` without ``None`` values.

    Mappings lose the entries whose value is ``None``, sequences lose the
    ``None`` elements. Only the top level is filtered.

    Raises:
        ValidationError: If ``coll`` is not a collection
    """
    if isinstance(coll, Mapping):
        return {k: v for k, v in coll.items() if v is not None}
    if isinstance(coll, (list, tuple, set, frozenset)):
        return type(coll)(v for v in coll if v is not None)
    raise ValidationError(
        "Argument is not a collection",
        field_name="coll",
        field_value=coll
    )


def normalize(
    named_args: Mapping[str, Any],
    fields: Optional[Mapping[str, Param]] = None,
    generic: bool = True
) -> Dict[str, Any]:
    """Build the wire ``params`` for a call.

    Args:
        named_args: Keyword arguments as given by the caller
        fields: Keyword name -> :class:`Param` for the endpoint-specific arguments
        generic: Whether to merge the generic listing options

    Returns:
        Wire parameters without ``None`` values
    """
    params: Dict[str, Any] = {}
    for name, param in (fields or {}).items():
        coerce = param.coerce or passthrough
        params[param.wire_key] = coerce(named_args.get(name))
    if generic:
        params.update(parse_generic_get_params(named_args))
    return remove_nils(params)


# Shorthands used by the endpoint tables
def ids(wire_key: str) -> Param:
    return Param(wire_key, coerce_ids)


def flag(wire_key: str) -> Param:
    return Param(wire_key)


def timestamp(wire_key: str) -> Param:
    return Param(wire_key, TimeParser.to_epoch_seconds)


TAG_PARAMS: Dict[str, Param] = {
    "eval_type": Param("evaltype", eval_type_to_id),
    "tag_filters": Param("tags", serialize_tag_filters),
}

SEVERITY_PARAM = Param("severities", coerce_severities)
EVENT_SOURCE_PARAM = Param("source", event_source_to_id)
HISTORY_PARAM = Param("history", history_value_type_to_id)
