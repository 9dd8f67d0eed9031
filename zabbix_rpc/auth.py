"""Authentication helper for the Zabbix JSON-RPC client."""

import logging
from typing import Optional

import httpx

from .models.config import ClientOptions, Connection, ContentLevel
from .rpc import json_rpc_request


logger = logging.getLogger(__name__)

LOGIN_METHOD = "user.login"


def login_options(options: Optional[ClientOptions] = None) -> ClientOptions:
    """Options used for ``user.login``: the caller's, forced to the data level.

    The token is the plain ``result`` of the call, so no further
    normalization may apply whatever the caller asked for.
    """
    return (options or ClientOptions()).evolve(content_level=ContentLevel.DATA)


def get_token(
    connection: Connection,
    options: Optional[ClientOptions] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    request_id: Optional[int] = None,
    transport: Optional[httpx.BaseTransport] = None
) -> Optional[str]:
    """Log in and return a fresh auth token.

    Tokens are not cached: every authenticated operation calls this first.

    Args:
        connection: Target frontend and default credentials
        options: Caller options, the content level is overridden
        user: Login name, defaults to ``connection.user``
        password: Password, defaults to ``connection.password``
        request_id: JSON-RPC id of the login call
        transport: Optional httpx transport

    Returns:
        The session token, or ``None`` if the server answered with an
        error envelope and ``raise_on_error`` is off
    """
    user = user if user is not None else connection.user
    password = password if password is not None else connection.password

    logger.debug(
        "Requesting Zabbix auth token",
        extra={"url": connection.url, "user": user}
    )
    token = json_rpc_request(
        connection,
        LOGIN_METHOD,
        params={"user": user, "password": password},
        request_id=request_id,
        options=login_options(options),
        transport=transport
    )
    if token is None:
        logger.warning("Zabbix login returned no token", extra={"url": connection.url, "user": user})
    return token
