import json

import pytest

from zabbix_rpc.config import ZabbixConfig
from zabbix_rpc.exceptions import ConfigurationError
from zabbix_rpc.models import ContentLevel


def test_from_env_reads_zabbix_variables(clean_env) -> None:
    clean_env.setenv("ZABBIX_URL", "https://zabbix.example.com/zabbix/")
    clean_env.setenv("ZABBIX_USER", "Admin")
    clean_env.setenv("ZABBIX_PASSWORD", "zabbix")
    clean_env.setenv("ZABBIX_CONTENT_LEVEL", "data")
    clean_env.setenv("ZABBIX_RAISE_ON_ERROR", "yes")
    clean_env.setenv("ZABBIX_TIMEOUT", "2.5")

    config = ZabbixConfig.from_env()

    assert config.url == "https://zabbix.example.com/zabbix"
    assert config.content_level == "data"
    assert config.raise_on_error is True
    assert config.timeout == 2.5
    assert config.log_level == "INFO"
    assert config.log_format == "text"


def test_from_env_requires_url(clean_env) -> None:
    with pytest.raises(ConfigurationError, match="url"):
        ZabbixConfig.from_env()


@pytest.mark.parametrize("name, value", [
    ("ZABBIX_CONTENT_LEVEL", "everything"),
    ("ZABBIX_CONVERT_RESULT", "maybe"),
    ("ZABBIX_TIMEOUT", "-1"),
    ("ZABBIX_TIMEOUT", "soon"),
    ("ZABBIX_LOG_FORMAT", "xml"),
    ("ZABBIX_API_PATH", "api_jsonrpc.php"),
])
def test_invalid_values_raise_configuration_error(clean_env, name, value) -> None:
    clean_env.setenv("ZABBIX_URL", "http://zabbix.local")
    clean_env.setenv(name, value)
    with pytest.raises(ConfigurationError):
        ZabbixConfig.from_env()


def test_environment_overrides_file(clean_env, tmp_path) -> None:
    config_file = tmp_path / "zabbix.json"
    config_file.write_text(json.dumps({
        "url": "http://file.local",
        "user": "file-user",
        "log_level": "debug",
    }))
    clean_env.setenv("ZABBIX_USER", "env-user")

    config = ZabbixConfig.from_env_and_file(config_file)

    assert config.url == "http://file.local"
    assert config.user == "env-user"
    assert config.log_level == "DEBUG"


def test_from_file_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        ZabbixConfig.from_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(ConfigurationError):
        ZabbixConfig.from_file(broken)

    listing = tmp_path / "list.json"
    listing.write_text("[]")
    with pytest.raises(ConfigurationError):
        ZabbixConfig.from_file(listing)


def test_to_connection_and_options() -> None:
    config = ZabbixConfig(url="http://zabbix.local", user="Admin", password="zabbix",
                          content_level="BODY", timeout=4)

    connection = config.to_connection()
    options = config.to_options()

    assert connection.url == "http://zabbix.local"
    assert connection.password == "zabbix"
    assert options.content_level is ContentLevel.BODY
    assert options.timeout == 4


def test_with_overrides_ignores_none_and_validates() -> None:
    config = ZabbixConfig(url="http://zabbix.local")

    assert config.with_overrides(log_level=None) is config
    assert config.with_overrides(log_level="warning").log_level == "WARNING"
    with pytest.raises(ConfigurationError):
        config.with_overrides(content_level="nope")


def test_summary_hides_password() -> None:
    config = ZabbixConfig(url="http://zabbix.local", password="secret")
    summary = config.get_summary()

    assert summary["password_set"] is True
    assert "secret" not in repr(summary)
    assert "secret" not in repr(config)
