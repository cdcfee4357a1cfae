"""Shared test fixtures for all test modules."""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime

import httpx
import pytest

from logpull_exporter.adapters.cloudflare.auth import Auth, KeyEmailAuth
from logpull_exporter.adapters.cloudflare.logpull import LogpullClient
from logpull_exporter.core.errors import RetryableFailure
from tests.helpers import BASE_URL, FIXED_NOW, GOOD_EMAIL, GOOD_KEY


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always reports 2021-01-01T12:01:00Z."""
    return lambda: FIXED_NOW


@pytest.fixture
def captured_failures() -> list[RetryableFailure]:
    """List that an error handler can append reported failures to."""
    return []


@pytest.fixture
async def logpull_client_factory() -> AsyncGenerator[
    Callable[..., LogpullClient], None
]:
    """Factory fixture for LogpullClients backed by httpx.MockTransport.

    Usage:
        async def test_something(logpull_client_factory):
            client = logpull_client_factory(logpull_api())
            await client.pull(...)
    """
    http_clients: list[httpx.AsyncClient] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        auth: Auth | None = None,
    ) -> LogpullClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        http_clients.append(http_client)
        return LogpullClient(
            auth or KeyEmailAuth(GOOD_KEY, GOOD_EMAIL),
            base_url=BASE_URL,
            http_client=http_client,
        )

    yield _make

    for http_client in http_clients:
        await http_client.aclose()


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(collector)
            async with asgi_test_client(app) as client:
                response = await client.get("/metrics")
    """

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
