"""Test configuration and fixtures."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from instantdb import AsyncInstantClient, InstantClient

APP_ID = "test-app-id"
SECRET = "test-secret"


class FakeService:
    """Records requests and answers them with canned responses per path."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response] = {}
        self.error: Exception | None = None

    def respond(self, path: str, status_code: int = 200, **kwargs: Any) -> None:
        self.responses[path] = httpx.Response(status_code, **kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.responses.get(request.url.path, httpx.Response(200, json={}))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def client(service: FakeService):
    with InstantClient(APP_ID, SECRET, transport=httpx.MockTransport(service.handler)) as c:
        yield c


@pytest.fixture
def async_client_factory(service: FakeService):
    """Async clients must be created inside the running event loop."""

    def make() -> AsyncInstantClient:
        return AsyncInstantClient(APP_ID, SECRET, transport=httpx.MockTransport(service.handler))

    return make
