"""Connection, per-call options and request argument models."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import ConfigurationError
from .enums import TagOperator, as_member


DEFAULT_API_PATH = "/api_jsonrpc.php"


class ContentLevel(str, Enum):
    """How far a response is unwrapped before it is handed back."""
    TRANSPORT_RAW = "transport-raw"
    BODY = "body"
    DATA = "data"
    BEST = "best"

    @classmethod
    def _missing_(cls, value):
        # "http-client" is the older name of the raw level
        if isinstance(value, str) and value.lower() == "http-client":
            return cls.TRANSPORT_RAW
        return None


class Connection(BaseModel):
    """Where and as whom to connect.

    ``url`` is the base URL of the Zabbix frontend, e.g.
    ``http://company.com/zabbix``, without the ``api_jsonrpc.php`` part.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Base URL of the Zabbix frontend")
    user: Optional[str] = Field(default=None, description="Login name used by user.login")
    password: Optional[str] = Field(default=None, description="Password used by user.login", repr=False)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the base URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")


class ClientOptions(BaseModel):
    """Immutable per-call options.

    Options travel explicitly with every call; use :meth:`evolve` to derive
    a variant instead of mutating shared state.
    """

    model_config = ConfigDict(frozen=True)

    content_level: ContentLevel = Field(
        default=ContentLevel.BEST,
        description="Level of content returned for API calls"
    )
    api_path: str = Field(
        default=DEFAULT_API_PATH,
        description="Constant part of the API URL, override behind a reverse proxy"
    )
    convert_result: bool = Field(
        default=True,
        description="Reshape time series results at the best level"
    )
    raise_on_error: bool = Field(
        default=False,
        description="Raise RemoteAPIError on JSON-RPC error envelopes at the data and best levels"
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Per-call deadline in seconds, None uses the HTTP client default"
    )

    @field_validator("content_level", mode="before")
    @classmethod
    def validate_content_level(cls, v: Any) -> ContentLevel:
        level = as_member(ContentLevel, v)
        if level is None:
            raise ConfigurationError(
                f"Unexpected content level: {v!r}",
                config_key="content_level",
                config_value=v
            )
        return level

    @field_validator("api_path")
    @classmethod
    def validate_api_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("API path must start with '/'")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Timeout must be greater than 0")
        return v

    def evolve(self, **changes: Any) -> "ClientOptions":
        """Return a copy with ``changes`` applied and validated."""
        return self.__class__(**{**self.model_dump(), **changes})


class TagFilter(BaseModel):
    """A rule matching entity tags by name, value and operator."""

    model_config = ConfigDict(frozen=True)

    tag: str = Field(..., description="Tag name")
    value: str = Field(default="", description="Value to compare against")
    operator: Union[TagOperator, str, None] = Field(
        default=TagOperator.LIKE,
        description="Comparison operator, like (substring) or equal"
    )
