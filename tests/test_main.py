import json

import httpx
import pytest

from zabbix_rpc.main import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_REMOTE_ERROR,
    build_parser,
    run,
    to_jsonable,
)
from zabbix_rpc.models import Instant

from .conftest import BASE_URL, LOGIN_TOKEN, FakeZabbix


@pytest.fixture
def zabbix_env(clean_env):
    clean_env.setenv("ZABBIX_URL", BASE_URL)
    clean_env.setenv("ZABBIX_USER", "Admin")
    clean_env.setenv("ZABBIX_PASSWORD", "zabbix")
    return clean_env


def _run(argv, server=None) -> int:
    args = build_parser().parse_args(argv)
    return run(args, transport=server.transport if server else None)


def test_call_prints_result_as_json(zabbix_env, capsys) -> None:
    server = FakeZabbix(results={"host.get": [{"hostid": "10084"}]})

    code = _run(["host.get", "--params", '{"output": ["hostid"]}'], server)

    assert code == EXIT_OK
    assert json.loads(capsys.readouterr().out) == [{"hostid": "10084"}]
    assert server.methods == ["user.login", "host.get"]
    assert server.bodies[1]["auth"] == LOGIN_TOKEN
    assert server.bodies[1]["params"] == {"output": ["hostid"]}


def test_no_auth_skips_login(zabbix_env, capsys) -> None:
    server = FakeZabbix(results={"apiinfo.version": "6.0.0"})

    assert _run(["--no-auth", "apiinfo.version"], server) == EXIT_OK
    assert server.methods == ["apiinfo.version"]
    assert json.loads(capsys.readouterr().out) == "6.0.0"


def test_time_series_keys_are_rendered_as_iso(zabbix_env, capsys) -> None:
    server = FakeZabbix(results={"history.get": [{"clock": "0", "ns": "5", "value": "1"}]})

    assert _run(["history.get"], server) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"1970-01-01T00:00:00.000000005Z": {"value": "1"}}


def test_content_level_flag(zabbix_env, capsys) -> None:
    server = FakeZabbix(results={"apiinfo.version": "6.0.0"})

    assert _run(["--no-auth", "--content-level", "body", "apiinfo.version"], server) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["result"] == "6.0.0"


def test_remote_error_exit_code(zabbix_env, capsys) -> None:
    zabbix_env.setenv("ZABBIX_RAISE_ON_ERROR", "true")
    server = FakeZabbix(errors={"host.get": {"code": -32602, "message": "Invalid params."}})

    assert _run(["host.get"], server) == EXIT_REMOTE_ERROR
    assert "Invalid params." in capsys.readouterr().err


def test_http_error_exit_code(zabbix_env) -> None:
    server = FakeZabbix(status_code=502)
    assert _run(["--no-auth", "apiinfo.version"], server) == EXIT_REMOTE_ERROR


def test_missing_url_is_configuration_error(clean_env, capsys) -> None:
    assert _run(["apiinfo.version"]) == EXIT_CONFIG_ERROR
    assert "Configuration error" in capsys.readouterr().err


def test_invalid_params_json(zabbix_env) -> None:
    assert _run(["host.get", "--params", "{oops"], FakeZabbix()) == EXIT_CONFIG_ERROR
    assert _run(["host.get", "--params", "42"], FakeZabbix()) == EXIT_CONFIG_ERROR


def test_validate_config_prints_summary(zabbix_env, capsys) -> None:
    assert _run(["--validate-config"]) == EXIT_OK
    out = capsys.readouterr().out
    assert BASE_URL in out
    assert "password_set: True" in out


def test_method_is_required(zabbix_env) -> None:
    assert _run([]) == EXIT_CONFIG_ERROR


def test_to_jsonable_nested_instants() -> None:
    assert to_jsonable({"points": [Instant(0)], Instant(1): {"v": (1, 2)}}) == {
        "points": ["1970-01-01T00:00:00Z"],
        "1970-01-01T00:00:01Z": {"v": [1, 2]},
    }


def test_non_json_response_is_remote_error(zabbix_env, capsys) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>Maintenance</html>"))
    args = build_parser().parse_args(["--no-auth", "apiinfo.version"])

    assert run(args, transport=transport) == EXIT_REMOTE_ERROR
    assert "Invalid response" in capsys.readouterr().err


def test_content_level_choices_use_transport_raw() -> None:
    args = build_parser().parse_args(["--content-level", "transport-raw", "apiinfo.version"])
    assert args.content_level == "transport-raw"
