from datetime import date, datetime, timezone

import pytest

from zabbix_rpc.exceptions import ValidationError
from zabbix_rpc.models import Instant, Severity, TagFilter, TagOperator
from zabbix_rpc.params import (
    Param,
    coerce_ids,
    coerce_severities,
    ids,
    is_generic_get_param,
    normalize,
    parse_generic_get_params,
    remove_nils,
    serialize_tag_filter,
    serialize_tag_filters,
    timestamp,
)
from zabbix_rpc.time_utils import TimeParser


def test_coerce_ids_scalar_and_one_element_collection_carry_same_string() -> None:
    assert coerce_ids(10084) == "10084"
    assert list(coerce_ids([10084])) == ["10084"]
    assert list(coerce_ids([10084]))[0] == coerce_ids(10084)
    assert list(coerce_ids((1, "2", 3))) == ["1", "2", "3"]


def test_coerce_ids_keeps_strings_whole() -> None:
    assert coerce_ids("10084") == "10084"
    assert coerce_ids(b"10084") == "10084"


def test_coerce_ids_none() -> None:
    assert coerce_ids(None) is None


def test_coerce_severities_drops_unknown_members() -> None:
    assert coerce_severities(Severity.HIGH) == 4
    assert coerce_severities(["warning", "bogus", Severity.DISASTER]) == [2, 5]
    assert coerce_severities("bogus") is None


def test_remove_nils_mapping_and_sequence() -> None:
    assert remove_nils({"a": 1, "b": None, "c": False, "d": {}}) == {"a": 1, "c": False, "d": {}}
    assert remove_nils([1, None, 0]) == [1, 0]
    assert remove_nils((None,)) == ()


def test_remove_nils_is_shallow() -> None:
    assert remove_nils({"a": {"b": None}}) == {"a": {"b": None}}


def test_remove_nils_rejects_scalars() -> None:
    with pytest.raises(ValidationError):
        remove_nils(42)


def test_generic_params_accept_keyword_and_wire_names() -> None:
    params = parse_generic_get_params({"count_output": True, "sortorder": "DESC", "host_ids": 1})
    assert params == {"countOutput": True, "sortorder": "DESC", "filter": {}}


def test_generic_params_default_filter() -> None:
    assert parse_generic_get_params({})["filter"] == {}
    assert parse_generic_get_params({"filter": {"host": "web"}})["filter"] == {"host": "web"}


def test_is_generic_get_param() -> None:
    assert is_generic_get_param("search_by_any")
    assert is_generic_get_param("searchByAny")
    assert not is_generic_get_param("host_ids")


def test_serialize_tag_filter_wire_shape() -> None:
    wire = serialize_tag_filter(TagFilter(tag="env", value="prod", operator=TagOperator.EQUAL))
    assert wire == {"tag": "env", "value": "prod", "operator": 2}


def test_serialize_tag_filter_defaults_to_like() -> None:
    assert serialize_tag_filter({"tag": "env", "value": "pr"})["operator"] == 0
    assert serialize_tag_filter(TagFilter(tag="env"))["operator"] == 0


def test_serialize_tag_filters_wraps_single_filter() -> None:
    assert serialize_tag_filters({"tag": "env", "value": "prod"}) == [
        {"tag": "env", "value": "prod", "operator": 0}
    ]
    assert serialize_tag_filters(None) is None


def test_serialize_tag_filter_rejects_other_types() -> None:
    with pytest.raises(ValidationError):
        serialize_tag_filter("env=prod")


def test_normalize_strips_absent_arguments() -> None:
    fields = {"host_ids": ids("hostids"), "limit_for_subselects": Param("limitSelects")}
    params = normalize({"host_ids": None, "limit_for_subselects": 5}, fields)
    assert params == {"limitSelects": 5, "filter": {}}


def test_normalize_without_generic_params() -> None:
    params = normalize({"output": "extend"}, {"host_ids": ids("hostids")}, generic=False)
    assert params == {}


def test_timestamp_truncates_sub_second_precision() -> None:
    coerce = timestamp("time_from").coerce
    moment = datetime(2020, 1, 1, 0, 0, 0, 999999, tzinfo=timezone.utc)
    assert coerce(moment) == 1577836800
    assert coerce(Instant(1577836800, 999_999_999)) == 1577836800
    assert coerce(1577836800) == 1577836800
    assert coerce(None) is None


def test_epoch_seconds_for_naive_datetime_and_date() -> None:
    assert TimeParser.to_epoch_seconds(datetime(1970, 1, 2)) == 86400
    assert TimeParser.to_epoch_seconds(date(1970, 1, 2)) == 86400


def test_epoch_seconds_truncate_toward_zero_before_epoch() -> None:
    moment = datetime(1969, 12, 31, 23, 59, 59, 500000, tzinfo=timezone.utc)
    assert TimeParser.to_epoch_seconds(moment) == 0
    assert TimeParser.to_epoch_seconds(datetime(1969, 12, 31, 23, 59, 58, tzinfo=timezone.utc)) == -2
    assert TimeParser.to_epoch_seconds(Instant(-2, 250_000_000)) == -1
