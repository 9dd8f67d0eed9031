"""Custom exception classes for the Zabbix JSON-RPC client."""

from typing import Optional, Dict, Any


class ZabbixClientError(Exception):
    """Base exception for all Zabbix client operations.

    Transport failures are not wrapped in this hierarchy: ``httpx`` errors
    reach the caller unmodified.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dictionary containing additional error context
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context
        }


class ConfigurationError(ZabbixClientError):
    """Raised when client configuration is invalid.

    This exception is raised when:
    - An unrecognized content level is requested
    - Required configuration values are missing
    - Configuration values are malformed
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize configuration error.

        Args:
            message: Error message describing the configuration issue
            config_key: Configuration key that has the issue
            config_value: Configuration value that is invalid
            context: Additional context about the configuration error
        """
        super().__init__(message, context)
        self.config_key = config_key
        self.config_value = config_value

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.config_key:
            result["config_key"] = self.config_key
        if self.config_value is not None:
            result["config_value"] = repr(self.config_value)
        return result


class ValidationError(ZabbixClientError):
    """Raised when an argument does not have the expected shape."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.field_name = field_name
        self.field_value = field_value

    def __str__(self) -> str:
        base_str = super().__str__()
        if self.field_name:
            return f"{base_str} (Field: {self.field_name})"
        return base_str

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.field_name:
            result["field_name"] = self.field_name
        if self.field_value is not None:
            result["field_value"] = repr(self.field_value)
        return result


class RemoteAPIError(ZabbixClientError):
    """Raised for a JSON-RPC error envelope when ``raise_on_error`` is enabled.

    Zabbix reports failures as ``{"error": {"code", "message", "data"}}``
    inside an HTTP 200 response.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Optional[str] = None,
        method: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize remote API error.

        Args:
            message: The ``message`` member of the error object
            code: JSON-RPC error code (e.g. -32602 for invalid params)
            data: The ``data`` member, Zabbix puts the detailed reason here
            method: RPC method that failed, when known
            context: Additional context about the failure
        """
        super().__init__(message, context)
        self.code = code
        self.data = data
        self.method = method

    def __str__(self) -> str:
        base_str = super().__str__()
        parts = []
        if self.code is not None:
            parts.append(f"code {self.code}")
        if self.data:
            parts.append(str(self.data))
        if parts:
            return f"{base_str} ({': '.join(parts)})"
        return base_str

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.code is not None:
            result["code"] = self.code
        if self.data:
            result["data"] = self.data
        if self.method:
            result["method"] = self.method
        return result

    @classmethod
    def from_envelope(cls, body: Dict[str, Any], method: Optional[str] = None) -> "RemoteAPIError":
        """Build the exception from a parsed response body carrying ``error``."""
        error = body.get("error") or {}
        return cls(
            error.get("message") or "Zabbix API returned an error",
            code=error.get("code"),
            data=error.get("data"),
            method=method,
            context={"request_id": body.get("id")}
        )


__all__ = [
    'ZabbixClientError',
    'ConfigurationError',
    'ValidationError',
    'RemoteAPIError',
]
