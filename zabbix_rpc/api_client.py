"""API client layer for the Zabbix JSON-RPC API."""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .auth import get_token
from .config import ZabbixConfig
from .models.config import ClientOptions, Connection
from .models.enums import HistoryValueType, event_object_to_id
from .params import (
    EVENT_SOURCE_PARAM,
    HISTORY_PARAM,
    SEVERITY_PARAM,
    TAG_PARAMS,
    Param,
    coerce_optional_str,
    flag,
    ids,
    is_generic_get_param,
    normalize,
    timestamp,
)
from .rpc import json_rpc_request


logger = logging.getLogger(__name__)


TEMPLATE_PARAMS: Dict[str, Param] = {
    "template_ids": ids("templateids"),
    "parent_template_ids": ids("parentTemplateids"),
    "group_ids": ids("groupids"),
    "host_ids": ids("hostids"),
    "graph_ids": ids("graphids"),
    "item_ids": ids("itemids"),
    "trigger_ids": ids("triggerids"),
    "with_items": flag("with_items"),
    "with_triggers": flag("with_triggers"),
    "with_graphs": flag("with_graphs"),
    "with_httptests": flag("with_httptests"),
    **TAG_PARAMS,
    "sort_by_fields": flag("sortfield"),
}

APPLICATION_PARAMS: Dict[str, Param] = {
    "application_ids": ids("applicationids"),
    "group_ids": ids("groupids"),
    "template_ids": ids("templateids"),
    "host_ids": ids("hostids"),
    "item_ids": ids("itemids"),
    "inherited": flag("inherited"),
    "templated": flag("templated"),
    "select_hosts": flag("selectHosts"),
    "select_items": flag("selectItems"),
    "select_discovery_rule": flag("selectDiscoveryRule"),
    "select_application_discovery": flag("selectApplicationDiscovery"),
    "sort_by_fields": flag("sortfield"),
}

HOST_PARAMS: Dict[str, Param] = {
    "group_ids": ids("groupids"),
    "application_ids": ids("applicationids"),
    "discovered_service_ids": ids("dserviceids"),
    "graph_ids": ids("graphids"),
    "host_ids": ids("hostids"),
    "web_check_ids": ids("httptestids"),
    "interface_ids": ids("interfaceids"),
    "item_ids": ids("itemids"),
    "maintenance_ids": ids("maintenanceids"),
    "proxy_ids": ids("proxyids"),
    "template_ids": ids("templateids"),
    "trigger_ids": ids("triggerids"),
    "monitored_hosts": flag("monitored_hosts"),
    "proxy_hosts": flag("proxy_hosts"),
    "templated_hosts": flag("templated_hosts"),
    "severities": SEVERITY_PARAM,
    **TAG_PARAMS,
    "inherited_tags": flag("inheritedTags"),
    "inventory_search": flag("searchInventory"),
    "limit_for_subselects": flag("limitSelects"),
    "sort_by_fields": flag("sortfield"),
}

ITEM_PARAMS: Dict[str, Param] = {
    "item_ids": ids("itemids"),
    "group_ids": ids("groupids"),
    "template_ids": ids("templateids"),
    "host_ids": ids("hostids"),
    "proxy_ids": ids("proxyids"),
    "interface_ids": ids("interfaceids"),
    "graph_ids": ids("graphids"),
    "trigger_ids": ids("triggerids"),
    "application_ids": ids("applicationids"),
    "inherited": flag("inherited"),
    "templated": flag("templated"),
    "monitored": flag("monitored"),
    "group": flag("group"),
    "host": flag("host"),
    "application": flag("application"),
    "with_triggers": flag("with_triggers"),
    "select_hosts": flag("selectHosts"),
    "select_interfaces": flag("selectInterfaces"),
    "select_triggers": flag("selectTriggers"),
    "select_applications": flag("selectApplications"),
    "select_discovery_rule": flag("selectDiscoveryRule"),
    "select_item_discovery": flag("selectItemDiscovery"),
    "select_preprocessing": flag("selectPreprocessing"),
    "limit_for_subselects": flag("limitSelects"),
    "sort_by_fields": flag("sortfield"),
}

TRIGGER_PARAMS: Dict[str, Param] = {
    "trigger_ids": ids("triggerids"),
    "group_ids": ids("groupids"),
    "template_ids": ids("templateids"),
    "host_ids": ids("hostids"),
    "item_ids": ids("itemids"),
    "application_ids": ids("applicationids"),
    "functions": flag("functions"),
    "group": flag("group"),
    "host": flag("host"),
    "inherited": flag("inherited"),
    "templated": flag("templated"),
    "dependent": flag("dependent"),
    "monitored": flag("monitored"),
    "active": flag("active"),
    "maintenance": flag("maintenance"),
    **TAG_PARAMS,
    "select_groups": flag("selectGroups"),
    "select_hosts": flag("selectHosts"),
    "select_items": flag("selectItems"),
    "select_functions": flag("selectFunctions"),
    "select_discovery_rule": flag("selectDiscoveryRule"),
    "select_last_event": flag("selectLastEvent"),
    "select_tags": flag("selectTags"),
    "select_trigger_discovery": flag("selectTriggerDiscovery"),
    "limit_for_subselects": flag("limitSelects"),
    "sort_by_fields": flag("sortfield"),
}

HISTORY_PARAMS: Dict[str, Param] = {
    "history_type": HISTORY_PARAM,
    "host_ids": ids("hostids"),
    "item_ids": ids("itemids"),
    "sort_by_fields": flag("sortfield"),
    "time_from": timestamp("time_from"),
    "time_to": timestamp("time_till"),
}

TREND_PARAMS: Dict[str, Param] = {
    "item_ids": ids("itemids"),
    "time_from": timestamp("time_from"),
    "time_to": timestamp("time_till"),
}

# "object" is resolved against "source" separately, see _event_object_param
_EVENT_COMMON_PARAMS: Dict[str, Param] = {
    "event_ids": ids("eventids"),
    "group_ids": ids("groupids"),
    "host_ids": ids("hostids"),
    "object_ids": ids("objectids"),
    "application_ids": ids("applicationids"),
    "source": EVENT_SOURCE_PARAM,
    "acknowledged": flag("acknowledged"),
    "suppressed": flag("suppressed"),
    "severities": SEVERITY_PARAM,
    **TAG_PARAMS,
    "time_from": timestamp("time_from"),
    "time_to": timestamp("time_till"),
    "eventid_from": Param("eventid_from", coerce_optional_str),
    "eventid_to": Param("eventid_till", coerce_optional_str),
}

EVENT_PARAMS: Dict[str, Param] = {
    **_EVENT_COMMON_PARAMS,
    "problem_from": timestamp("problem_time_from"),
    "problem_to": timestamp("problem_time_till"),
    "values": flag("value"),
}

PROBLEM_PARAMS: Dict[str, Param] = {
    **_EVENT_COMMON_PARAMS,
    "recent": flag("recent"),
    "sort_by_fields": flag("sortfield"),
}


def _event_object_param(named_args: Mapping[str, Any]) -> Dict[str, Any]:
    object_id = event_object_to_id(named_args.get("source"), named_args.get("object"))
    if object_id is None:
        return {}
    return {"object": object_id}


class ZabbixAPIClient:
    """Client for the Zabbix JSON-RPC API.

    Every authenticated operation logs in first and sends the fresh token
    along with the call; tokens are never cached. All per-call behaviour
    (content level, API path, deadline...) comes from the immutable
    ``options``.

    Attributes:
        connection: Target frontend and default credentials
        options: Options applied to every call of this client
        transport: Optional httpx transport shared by every call
    """

    def __init__(
        self,
        connection: Connection,
        options: Optional[ClientOptions] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """Initialize the client.

        Args:
            connection: Zabbix base URL and credentials
            options: Per-call options, defaults to ``ClientOptions()``
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``
        """
        self.connection = connection
        self.options = options or ClientOptions()
        self.transport = transport

        logger.info(
            "Initialized Zabbix API client",
            extra={
                "url": self.connection.url,
                "api_path": self.options.api_path,
                "content_level": self.options.content_level.value
            }
        )

    @classmethod
    def from_config(
        cls,
        config: ZabbixConfig,
        transport: Optional[httpx.BaseTransport] = None
    ) -> "ZabbixAPIClient":
        return cls(config.to_connection(), config.to_options(), transport=transport)

    def with_options(self, **changes: Any) -> "ZabbixAPIClient":
        """Return a client sharing this connection with some options changed."""
        return self.__class__(self.connection, self.options.evolve(**changes), transport=self.transport)

    def _request(
        self,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        auth: Optional[str] = None,
        request_id: Optional[int] = None
    ) -> Any:
        return json_rpc_request(
            self.connection,
            method,
            params=params,
            auth=auth,
            request_id=request_id,
            options=self.options,
            transport=self.transport
        )

    def _token(self) -> Optional[str]:
        return get_token(self.connection, self.options, transport=self.transport)

    def _get(
        self,
        operation: str,
        method: str,
        fields: Mapping[str, Param],
        named_args: Dict[str, Any],
        request_id: Optional[int],
        extra_names: tuple = ()
    ) -> Any:
        for name in named_args:
            if name not in fields and name not in extra_names and not is_generic_get_param(name):
                raise TypeError(f"{operation}() got an unexpected keyword argument '{name}'")

        auth_token = self._token()
        params = normalize(named_args, fields)
        if "object" in extra_names:
            params.update(_event_object_param(named_args))

        logger.debug(
            "Calling Zabbix API",
            extra={"method": method, "param_keys": sorted(params)}
        )
        return self._request(method, params, auth=auth_token, request_id=request_id)

    def call(
        self,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        auth: bool = True,
        request_id: Optional[int] = None
    ) -> Any:
        """Call any API method with already wire-shaped ``params``.

        Args:
            method: RPC method name, e.g. ``"hostgroup.get"``
            params: Wire parameters, ``None`` values are dropped
            auth: Whether to log in first and send the token
            request_id: JSON-RPC id
        """
        auth_token = self._token() if auth else None
        return self._request(method, params, auth=auth_token, request_id=request_id)

    # GLOBAL

    def api_version(self, request_id: Optional[int] = None) -> Any:
        """Get the API version (``apiinfo.version``), no auth needed."""
        return self._request("apiinfo.version", request_id=request_id)

    def login(
        self,
        user: Optional[str] = None,
        password: Optional[str] = None,
        request_id: Optional[int] = None
    ) -> Optional[str]:
        """Authenticate and return an auth token (``user.login``).

        The call always resolves at the data level so the plain token comes
        back whatever this client's content level is.
        """
        return get_token(
            self.connection,
            self.options,
            user=user,
            password=password,
            request_id=request_id,
            transport=self.transport
        )

    # DATA MODEL

    def get_templates(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve host templates (``template.get``).

        Accepts the keys of ``TEMPLATE_PARAMS`` plus the generic listing
        options (``output``, ``filter``, ``limit``...).
        """
        return self._get("get_templates", "template.get", TEMPLATE_PARAMS, kwargs, request_id)

    def get_applications(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve applications (``application.get``)."""
        return self._get("get_applications", "application.get", APPLICATION_PARAMS, kwargs, request_id)

    def get_hosts(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve hosts (``host.get``).

        ``severities`` takes one :class:`~zabbix_rpc.models.enums.Severity`
        or a list of them; ``tag_filters`` a list of
        :class:`~zabbix_rpc.models.config.TagFilter` or equivalent mappings,
        combined according to ``eval_type``.
        """
        return self._get("get_hosts", "host.get", HOST_PARAMS, kwargs, request_id)

    def get_items(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve items (``item.get``)."""
        return self._get("get_items", "item.get", ITEM_PARAMS, kwargs, request_id)

    def get_triggers(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve triggers (``trigger.get``)."""
        return self._get("get_triggers", "trigger.get", TRIGGER_PARAMS, kwargs, request_id)

    # TIME SERIES

    def get_history(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve history values (``history.get``).

        ``history_type`` defaults to unsigned integers and ``sort_by_fields``
        to ``"clock"``. ``time_from``/``time_to`` accept datetimes or epoch
        seconds. At the best level the rows come back keyed by
        :class:`~zabbix_rpc.models.responses.Instant`.
        """
        kwargs.setdefault("history_type", HistoryValueType.UNSIGNED)
        kwargs.setdefault("sort_by_fields", "clock")
        return self._get("get_history", "history.get", HISTORY_PARAMS, kwargs, request_id)

    def get_trends(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve trends (``trend.get``)."""
        return self._get("get_trends", "trend.get", TREND_PARAMS, kwargs, request_id)

    # EVENTS

    def get_events(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve events (``event.get``).

        ``source`` is an :class:`~zabbix_rpc.models.enums.EventSource` and
        ``object`` an :class:`~zabbix_rpc.models.enums.EventObject` valid
        for that source. ``problem_from``/``problem_to`` filter on the time
        of the related problems.
        """
        return self._get("get_events", "event.get", EVENT_PARAMS, kwargs, request_id,
                         extra_names=("object",))

    def get_problems(self, request_id: Optional[int] = None, **kwargs: Any) -> Any:
        """Retrieve problems (``problem.get``)."""
        return self._get("get_problems", "problem.get", PROBLEM_PARAMS, kwargs, request_id,
                         extra_names=("object",))


__all__ = ["ZabbixAPIClient"]
