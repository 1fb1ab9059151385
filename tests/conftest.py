"""Test fixtures — an in-memory session, a scripted backend, a fake realtime socket.

Learn: nothing here talks to a network. The pattern is:

1. MemorySessionStore holds the signed-in identity for the test
2. FakeBackend is an httpx.MockTransport handler: tests register canned
   responses per (method, path) and afterwards inspect every request
   that was actually sent
3. FakeRealtime stands in for the supabase socket: it records which
   channels are open and lets a test push a postgres change into one

A test asserting "zero network calls" checks backend.requests == [].
"""

import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio

from clubdesk.api import ApiClient, ClubApi
from clubdesk.auth.session import MemorySessionStore
from clubdesk.cache.query_cache import QueryCache
from clubdesk.services.feedback import Toaster

BACKEND_URL = "http://backend.test/api"
CLUB_ID = "club-1"
USER_ID = "user-1"
TENANT_ID = "tenant-1"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    def __init__(self):
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    @staticmethod
    def _path(url: httpx.URL) -> str:
        if url.host == "backend.test":
            return url.path[len("/api"):]
        return f"{url.scheme}://{url.host}{url.path}"

    def route(self, method: str, path: str, *, status: int = 200, json: Any = None,
              text: Optional[str] = None, handler: Optional[Callable] = None) -> None:
        if handler is not None:
            self.routes[(method, path)] = handler
        elif text is not None:
            self.routes[(method, path)] = httpx.Response(status, text=text)
        else:
            self.routes[(method, path)] = httpx.Response(status, json=json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, self._path(request.url)))
        if route is None:
            return httpx.Response(404, json={"message": f"no route {request.method} {request.url}"})
        if callable(route):
            return route(request)
        return httpx.Response(route.status_code, content=route.content, headers=route.headers)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method)
            and (path is None or self._path(r.url) == path)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


class FakeRealtime:
    """In-memory RealtimeTransport."""

    def __init__(self):
        self.channels: dict[str, list] = {}
        self.opened: list[str] = []
        self.closed: list[str] = []

    async def open_channel(self, name, listeners, on_status):
        self.channels[name] = list(listeners)
        self.opened.append(name)
        on_status("SUBSCRIBED", None)
        return name

    async def close_channel(self, handle):
        self.closed.append(handle)
        self.channels.pop(handle, None)

    def listeners(self, name: str) -> list:
        return self.channels.get(name, [])

    def emit(self, channel: str, table: str, payload: Optional[dict] = None) -> int:
        """Deliver one change to every listener on channel for table."""
        hits = 0
        for listener in self.channels.get(channel, []):
            if listener.table == table:
                listener.callback(payload or {"eventType": "UPDATE", "table": table})
                hits += 1
        return hits


class FlakyRealtime(FakeRealtime):
    """FakeRealtime whose fail_on-th open_channel call raises, once."""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on
        self.attempts = 0

    async def open_channel(self, name, listeners, on_status):
        self.attempts += 1
        if self.attempts == self.fail_on:
            raise ConnectionError("realtime socket closed")
        return await super().open_channel(name, listeners, on_status)


@pytest.fixture()
def session_store():
    return MemorySessionStore({
        "userId": USER_ID,
        "email": "cashier@club.test",
        "role": "CASHIER",
        "clubId": CLUB_ID,
        "tenantId": TENANT_ID,
        "authToken": "token-abc",
    })


@pytest.fixture()
def empty_store():
    return MemorySessionStore()


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest_asyncio.fixture()
async def api_client(backend, session_store):
    client = ApiClient(session_store, base_url=BACKEND_URL, transport=httpx.MockTransport(backend))
    async with client:
        yield client


@pytest.fixture()
def api(api_client):
    return ClubApi(api_client)


@pytest.fixture()
def cache():
    return QueryCache()


@pytest.fixture()
def toaster():
    return Toaster()


@pytest.fixture()
def realtime_transport():
    return FakeRealtime()
