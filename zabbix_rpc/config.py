"""Configuration management for the Zabbix JSON-RPC client."""

import json
import os
from pathlib import Path
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models.config import DEFAULT_API_PATH, ClientOptions, Connection, ContentLevel
from .models.enums import as_member


_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"expected one of {', '.join(_TRUE_VALUES + _FALSE_VALUES)}")


def _parse_optional_float(value: str) -> Optional[float]:
    value = value.strip()
    if not value or value.lower() == "none":
        return None
    return float(value)


class ZabbixConfig(BaseModel):
    """Configuration for the Zabbix client and its command line."""

    url: str = Field(..., description="Base URL of the Zabbix frontend")
    user: Optional[str] = Field(default=None, description="Login name for user.login")
    password: Optional[str] = Field(default=None, description="Password for user.login", repr=False)

    api_path: str = Field(default=DEFAULT_API_PATH, description="Path of the JSON-RPC endpoint")
    content_level: str = Field(default=ContentLevel.BEST.value, description="Default content level")
    convert_result: bool = Field(default=True, description="Reshape time series at the best level")
    raise_on_error: bool = Field(default=False, description="Raise on JSON-RPC error envelopes")
    timeout: Optional[float] = Field(default=None, description="Per-call deadline in seconds")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json or text)")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate Zabbix frontend URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

    @field_validator("api_path")
    @classmethod
    def validate_api_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("API path must start with '/'")
        return v

    @field_validator("content_level")
    @classmethod
    def validate_content_level(cls, v: str) -> str:
        level = as_member(ContentLevel, v)
        if level is None:
            valid = ", ".join(member.value for member in ContentLevel)
            raise ValueError(f"Content level must be one of: {valid}")
        return level.value

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Timeout must be greater than 0")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ("json", "text")
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Log format must be one of: {', '.join(valid_formats)}")
        return v_lower

    # Environment variable -> (field, parser)
    ENV_MAPPINGS: ClassVar[Dict[str, Tuple[str, Callable[[str], Any]]]] = {
        "ZABBIX_URL": ("url", str.strip),
        "ZABBIX_USER": ("user", str),
        "ZABBIX_PASSWORD": ("password", str),
        "ZABBIX_API_PATH": ("api_path", str.strip),
        "ZABBIX_CONTENT_LEVEL": ("content_level", str.strip),
        "ZABBIX_CONVERT_RESULT": ("convert_result", _parse_bool),
        "ZABBIX_RAISE_ON_ERROR": ("raise_on_error", _parse_bool),
        "ZABBIX_TIMEOUT": ("timeout", _parse_optional_float),
        "ZABBIX_LOG_LEVEL": ("log_level", str.strip),
        "ZABBIX_LOG_FORMAT": ("log_format", str.strip),
    }

    @classmethod
    def _env_values(cls) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for env_var, (field_name, parser) in cls.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            try:
                values[field_name] = parser(env_value)
            except (ValueError, TypeError) as e:
                raise ConfigurationError(
                    f"Invalid value for {env_var}: {e}",
                    config_key=env_var,
                    config_value=env_value
                ) from e
        return values

    @classmethod
    def _build(cls, values: Dict[str, Any]) -> "ZabbixConfig":
        try:
            return cls(**values)
        except PydanticValidationError as e:
            errors = {".".join(str(x) for x in err["loc"]): err["msg"] for err in e.errors()}
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(f'{k}: {v}' for k, v in errors.items())}",
                context={"validation_errors": errors}
            ) from e

    @classmethod
    def from_env(cls) -> "ZabbixConfig":
        """Create configuration from environment variables (and a ``.env`` file).

        Raises:
            ConfigurationError: If a variable is missing or invalid
        """
        load_dotenv()
        return cls._build(cls._env_values())

    @classmethod
    def from_file(cls, config_path: Path) -> "ZabbixConfig":
        """Create configuration from a JSON configuration file.

        Args:
            config_path: Path to the JSON configuration file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the file is not a JSON object or values are invalid
        """
        return cls._build(cls._read_file(config_path))

    @classmethod
    def from_env_and_file(cls, config_path: Optional[Path] = None) -> "ZabbixConfig":
        """Create configuration from an optional JSON file overridden by the environment.

        Environment variables take precedence over config file values.
        """
        values: Dict[str, Any] = {}
        if config_path:
            values.update(cls._read_file(config_path))
        load_dotenv()
        values.update(cls._env_values())
        return cls._build(values)

    @staticmethod
    def _read_file(config_path: Path) -> Dict[str, Any]:
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file {config_path}: {e}",
                config_key="config_file",
                config_value=str(config_path)
            ) from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a JSON object, got {type(file_config).__name__}",
                config_key="config_file",
                config_value=str(config_path)
            )
        return file_config

    def with_overrides(self, **changes: Any) -> "ZabbixConfig":
        """Return a validated copy with the non-``None`` ``changes`` applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return self
        return self._build({**self.model_dump(), **changes})

    def to_connection(self) -> Connection:
        return Connection(url=self.url, user=self.user, password=self.password)

    def to_options(self) -> ClientOptions:
        return ClientOptions(
            content_level=self.content_level,
            api_path=self.api_path,
            convert_result=self.convert_result,
            raise_on_error=self.raise_on_error,
            timeout=self.timeout
        )

    def get_summary(self) -> Dict[str, Any]:
        """Configuration summary safe to print: credentials are reported as set or not."""
        return {
            "url": self.url,
            "user": self.user,
            "password_set": bool(self.password),
            "api_path": self.api_path,
            "content_level": self.content_level,
            "convert_result": self.convert_result,
            "raise_on_error": self.raise_on_error,
            "timeout": self.timeout,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }
