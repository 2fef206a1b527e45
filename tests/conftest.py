"""Shared fixtures and stubs for VardexPay client tests.

``FakeVardexAPI`` answers requests from a route table and records every
request it sees, so tests can assert on headers, bodies and call counts
without touching the network.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from vardexpay.core.config import ClientConfig
from vardexpay.exchange.client import VardexPayClient

API = "https://api.vardexpay.com"
SITE = "https://vardexpay.com/api"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeVardexAPI:
    """Route-table stub for both VardexPay hosts."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, response: Route) -> None:
        self.routes[(method.upper(), url)] = response

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url))
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"error": "no route"})
        if callable(route):
            return route(request)
        return route

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


def login_ok(token: str = "tok-1234567890") -> httpx.Response:
    return httpx.Response(200, json="Safality", headers={"session": token})


@pytest.fixture
def fake_api() -> FakeVardexAPI:
    return FakeVardexAPI()


@pytest.fixture
def make_client(fake_api):
    def _make(config: Optional[ClientConfig] = None) -> VardexPayClient:
        return VardexPayClient(config, transport=httpx.MockTransport(fake_api.handle))

    return _make


@pytest.fixture
def logged_in_client(fake_api, make_client):
    """Client factory whose login route is already wired for success."""
    fake_api.add("POST", f"{API}/auth/login", login_ok())

    async def _make() -> VardexPayClient:
        client = make_client()
        await client.login("user@example.com", "hunter22")
        fake_api.requests.clear()
        return client

    return _make
