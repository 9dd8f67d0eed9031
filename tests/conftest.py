import json
import os
from typing import Any, Dict, List, Optional

import httpx
import pytest

from zabbix_rpc.models import ClientOptions, Connection


LOGIN_TOKEN = "dd021d4d2fa8b2c4bd2d0d1d2b4e5f6a"
BASE_URL = "http://zabbix.example.com/zabbix"


class FakeZabbix:
    """Minimal JSON-RPC server answering per method and recording requests."""

    def __init__(
        self,
        results: Optional[Dict[str, Any]] = None,
        errors: Optional[Dict[str, Dict[str, Any]]] = None,
        status_code: int = 200
    ):
        self.results = {"user.login": LOGIN_TOKEN}
        self.results.update(results or {})
        self.errors = dict(errors or {})
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    @property
    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    @property
    def methods(self) -> List[str]:
        return [body["method"] for body in self.bodies]

    def last_params(self) -> Dict[str, Any]:
        return self.bodies[-1]["params"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        method = body["method"]
        if method in self.errors:
            payload = {"jsonrpc": "2.0", "error": self.errors[method], "id": body["id"]}
        else:
            payload = {"jsonrpc": "2.0", "result": self.results.get(method), "id": body["id"]}
        return httpx.Response(self.status_code, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_zabbix() -> FakeZabbix:
    return FakeZabbix()


@pytest.fixture
def connection() -> Connection:
    return Connection(url=BASE_URL, user="Admin", password="zabbix")


@pytest.fixture
def default_options() -> ClientOptions:
    return ClientOptions()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without any ZABBIX_* variable and no stray .env file."""
    for name in list(os.environ):
        if name.startswith("ZABBIX_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
