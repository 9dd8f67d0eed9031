"""Zabbix RPC Client - A Python client for the Zabbix JSON-RPC API."""

__version__ = "0.1.0"
__description__ = "Client for the Zabbix JSON-RPC API with content levels and time series reshaping"

from .api_client import ZabbixAPIClient
from .auth import get_token
from .config import ZabbixConfig
from .exceptions import ConfigurationError, RemoteAPIError, ValidationError, ZabbixClientError
from .models import (
    ClientOptions,
    Connection,
    ContentLevel,
    EvalType,
    EventObject,
    EventSource,
    HistoryValueType,
    Instant,
    Severity,
    TagFilter,
    TagOperator,
)
from .rpc import json_rpc_request

__all__ = [
    "ZabbixAPIClient",
    "ZabbixConfig",
    "get_token",
    "json_rpc_request",
    "Connection",
    "ClientOptions",
    "ContentLevel",
    "TagFilter",
    "Instant",
    "Severity",
    "EvalType",
    "TagOperator",
    "EventSource",
    "EventObject",
    "HistoryValueType",
    "ZabbixClientError",
    "ConfigurationError",
    "ValidationError",
    "RemoteAPIError",
]
