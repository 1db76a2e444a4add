"""Shared fixtures: an in-memory backend served through httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from api.client import PortalApiClient
from api.sessions import Session, SessionScope
from utils.query_cache import QueryCache

Responder = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """
    Routes (method, path) pairs to canned responses and records every request.

    A route value is either ``(status_code, json_body)`` or a callable taking
    the httpx.Request. A list of values is consumed in order, the last one
    repeating.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Responder]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Responder) -> "FakeBackend":
        self.routes[(method.upper(), path)] = list(responses)
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"success": False, "error": "route not found"})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder):
            return responder(request)
        status, body = responder
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content.decode("utf-8")) if request.content else None


def ok(data: Any = None, message: Optional[str] = None, pagination: Optional[dict] = None) -> dict:
    """Success envelope."""
    body: Dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return body


def fail(error: str) -> dict:
    """Failure envelope."""
    return {"success": False, "error": error}


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def portal_session() -> Session:
    return Session(SessionScope.PORTAL, token="portal-token", role="officer", user_id="9").init()


@pytest.fixture
def citizen_session() -> Session:
    return Session(SessionScope.CITIZEN, token="citizen-token", role="citizen", user_id="7").init()


@pytest.fixture
def portal_client(backend, portal_session):
    with PortalApiClient("http://backend.test", portal_session, transport=backend.transport) as client:
        yield client


@pytest.fixture
def citizen_client(backend, citizen_session):
    with PortalApiClient("http://backend.test", citizen_session, transport=backend.transport) as client:
        yield client


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()
