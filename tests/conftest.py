#  Weather Proxy - Test Fixtures
#
#  Shared fixtures for the test suite.
#  Uses DI container overrides instead of monkey-patching singletons, and an
#  httpx.MockTransport stub in place of the real upstream API.
#
#  Depends on: weather_proxy/config.py, weather_proxy/container.py, weather_proxy/app.py
#  Used by:    all test files

import json
from unittest.mock import patch

import httpx
import pytest
from dependency_injector import providers

from weather_proxy.config import ProxySettings

TEST_API_KEY = "secret-key-123"
TEST_BASE_URL = "https://weather.test/data/2.5/weather"


# ---------------------------------------------------------------------------
# Settings / clock
# ---------------------------------------------------------------------------

@pytest.fixture
def proxy_settings():
    return ProxySettings(
        upstream_base_url=TEST_BASE_URL,
        key_name="appid",
        key_value=TEST_API_KEY,
        environment="development",
        cache_duration=120,
        upstream_timeout=5.0,
    )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# Upstream stub
# ---------------------------------------------------------------------------

class UpstreamStub:
    """Counting stand-in for the upstream API.

    Records every request that reaches it. Set `refuse` to simulate a
    connection failure, or change `status_code` / `payload` per test.
    """

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.payload: dict = {"temp": 72}
        self.status_code = 200
        self.refuse = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.refuse:
            raise httpx.ConnectError("Connection refused", request=request)
        self.calls.append(request)
        return httpx.Response(
            self.status_code,
            content=json.dumps(self.payload, separators=(",", ":")).encode(),
            headers={"Content-Type": "application/json"},
        )

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
async def upstream_http(upstream):
    """httpx.AsyncClient whose transport is the upstream stub."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    yield client
    await client.aclose()


# ---------------------------------------------------------------------------
# Pipeline services
# ---------------------------------------------------------------------------

@pytest.fixture
def response_cache(proxy_settings, fake_clock):
    from weather_proxy.services.response_cache import ResponseCache
    return ResponseCache(proxy_settings, clock=fake_clock)


@pytest.fixture
def forwarder(proxy_settings, upstream_http):
    from weather_proxy.services.forwarder import UpstreamForwarder
    return UpstreamForwarder(proxy_settings, upstream_http)


# ---------------------------------------------------------------------------
# FastAPI client fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def app_client(proxy_settings, upstream_http, response_cache, forwarder):
    """Client for the FastAPI app with the pipeline wired to the upstream stub.

    Uses explicit try/finally with reset_override() so DI state is fully
    cleaned up between tests.
    """
    from httpx import ASGITransport, AsyncClient
    from weather_proxy.app import app, container
    from weather_proxy.rate_limit import limiter as _limiter

    container.settings.override(providers.Object(proxy_settings))
    container.http_client.override(providers.Object(upstream_http))
    container.response_cache.override(providers.Object(response_cache))
    container.forwarder.override(providers.Object(forwarder))

    limit_patcher = patch("weather_proxy.config.RATE_LIMIT", "100 per 10 minutes")
    hops_patcher = patch("weather_proxy.config.TRUSTED_PROXY_HOPS", 1)
    limit_patcher.start()
    hops_patcher.start()

    # Reset rate limiter storage so tests don't hit limits from prior tests
    _limiter.reset()

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        limit_patcher.stop()
        hops_patcher.stop()
        container.settings.reset_override()
        container.http_client.reset_override()
        container.response_cache.reset_override()
        container.forwarder.reset_override()
