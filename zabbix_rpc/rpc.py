"""JSON-RPC plumbing: envelope, HTTP transport and response resolution."""

import json
from collections.abc import Iterator, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

import httpx
import structlog

from .exceptions import ConfigurationError, RemoteAPIError
from .models.config import ClientOptions, Connection, ContentLevel
from .models.enums import as_member
from .models.responses import Instant
from .params import remove_nils
from .time_utils import TimeParser
from .timeseries import looks_like_series, normalize_series


logger = structlog.get_logger(__name__)

JSONRPC_VERSION = "2.0"
DEFAULT_REQUEST_ID = 1
JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def build_envelope(
    method: str,
    params: Optional[Mapping[str, Any]] = None,
    auth: Optional[str] = None,
    request_id: Optional[int] = None
) -> Dict[str, Any]:
    """Wrap a call into a JSON-RPC 2.0 request object.

    ``auth`` is always present, even when ``None``; only ``params`` is
    stripped of ``None`` values. The id defaults to a constant, so it can't
    be used to correlate concurrent calls.
    """
    return {
        "jsonrpc": JSONRPC_VERSION,
        "method": method,
        "id": DEFAULT_REQUEST_ID if request_id is None else request_id,
        "auth": auth,
        "params": remove_nils(params if params is not None else {}),
    }


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (Instant, datetime, date)):
        return TimeParser.to_epoch_seconds(obj)
    if isinstance(obj, (Iterator, set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def serialize_envelope(envelope: Mapping[str, Any]) -> str:
    return json.dumps(envelope, default=_json_default)


def send(
    base_url: str,
    api_path: str,
    envelope: Mapping[str, Any],
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None
) -> httpx.Response:
    """POST the envelope to ``<base_url><api_path>`` and return the response.

    Blocking. Errors raised by httpx (connection failures, timeouts, non-2xx
    statuses via ``raise_for_status``) propagate unmodified.

    Args:
        base_url: Base URL of the Zabbix frontend
        api_path: Path of the JSON-RPC endpoint
        envelope: Request object from :func:`build_envelope`
        timeout: Deadline in seconds for the whole exchange
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
    """
    url = f"{base_url}{api_path}"
    client_kwargs: Dict[str, Any] = {}
    if timeout is not None:
        client_kwargs["timeout"] = httpx.Timeout(timeout)
    if transport is not None:
        client_kwargs["transport"] = transport

    logger.debug(
        "Sending JSON-RPC request",
        method=envelope.get("method"),
        request_id=envelope.get("id"),
        url=url,
    )
    with httpx.Client(**client_kwargs) as client:
        response = client.post(url, content=serialize_envelope(envelope), headers=JSON_HEADERS)
    logger.debug(
        "Received JSON-RPC response",
        status_code=response.status_code,
        response_size=len(response.content),
        url=url,
    )
    response.raise_for_status()
    return response


def resolve(
    raw_response: httpx.Response,
    content_level: Any = ContentLevel.BEST,
    convert_result: bool = True,
    raise_on_error: bool = False,
    method: Optional[str] = None
) -> Any:
    """Unwrap a response down to the requested content level.

    - ``transport-raw``: the response itself (``http-client`` is accepted too)
    - ``body``: the parsed JSON body, error envelopes included
    - ``data``: the ``result`` member, ``None`` for an error envelope
    - ``best``: ``data``, reshaped by :func:`normalize_series` when it looks
      like a time series and ``convert_result`` is set

    Raises:
        ConfigurationError: If ``content_level`` is not a known level
        RemoteAPIError: On an error envelope at ``data``/``best`` when
            ``raise_on_error`` is set
    """
    level = as_member(ContentLevel, content_level)
    if level is None:
        raise ConfigurationError(
            f"Unexpected content level: {content_level!r}",
            config_key="content_level",
            config_value=content_level
        )

    if level is ContentLevel.TRANSPORT_RAW:
        return raw_response

    body = raw_response.json()
    if level is ContentLevel.BODY:
        return body

    if isinstance(body, Mapping) and "error" in body:
        logger.info(
            "JSON-RPC error envelope received",
            method=method,
            code=(body.get("error") or {}).get("code"),
        )
        if raise_on_error:
            raise RemoteAPIError.from_envelope(body, method=method)

    result = body.get("result") if isinstance(body, Mapping) else None
    if level is ContentLevel.DATA:
        return result

    if convert_result and looks_like_series(result):
        return normalize_series(result)
    return result


def json_rpc_request(
    connection: Connection,
    method: str,
    params: Optional[Mapping[str, Any]] = None,
    auth: Optional[str] = None,
    request_id: Optional[int] = None,
    options: Optional[ClientOptions] = None,
    transport: Optional[httpx.BaseTransport] = None
) -> Any:
    """Build, send and resolve one call according to ``options``."""
    options = options or ClientOptions()
    envelope = build_envelope(method, params, auth=auth, request_id=request_id)
    raw_response = send(
        connection.url,
        options.api_path,
        envelope,
        timeout=options.timeout,
        transport=transport
    )
    return resolve(
        raw_response,
        options.content_level,
        convert_result=options.convert_result,
        raise_on_error=options.raise_on_error,
        method=method
    )
