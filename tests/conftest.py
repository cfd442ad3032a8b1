"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable, Generator
from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.gateway.api.deps import get_clock, get_upstream_client
from backend.gateway.main import app
from tests.upstream_samples import MockHandler, mock_upstream_client


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client; dependency overrides are cleared afterwards."""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def captured_requests() -> list[httpx.Request]:
    """Outbound requests seen by the mocked upstream."""
    return []


@pytest.fixture
def use_upstream(
    captured_requests: list[httpx.Request],
) -> Callable[[MockHandler], None]:
    """Route upstream calls to a mock handler, recording each request.

    Usage:
        def test_something(client, use_upstream):
            use_upstream(lambda request: httpx.Response(200, text="..."))
            client.get("/api/fertilizer?cropCode=01")
    """

    def install(handler: MockHandler) -> None:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            return handler(request)

        upstream = mock_upstream_client(recording_handler)
        app.dependency_overrides[get_upstream_client] = lambda: upstream

    return install


@pytest.fixture
def freeze_clock() -> Callable[[datetime], None]:
    """Pin the wall clock seen by handlers."""

    def install(moment: datetime) -> None:
        app.dependency_overrides[get_clock] = lambda: (lambda: moment)

    return install
