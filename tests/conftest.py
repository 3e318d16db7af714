"""
Shared fixtures for the proxy test suite.

Nothing here touches the network: the upstream is an httpx.MockTransport
backed by FakeUpstream, and cache expiry runs on FakeClock.
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from lirat_proxy.core.config import Settings
from lirat_proxy.main import create_app
from lirat_proxy.services.cache_store import CacheStore
from lirat_proxy.services.http_client import UpstreamClient

UPSTREAM = "http://upstream.test"
RATES_PATH = "/alba-cur/cur/1.json"
HISTORY_PATHS = {
    "damascus": "/currency/9/damascus.json",
    "aleppo": "/currency/9/aleppo.json",
    "idlib": "/currency/9/idlib.json",
}


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class FakeUpstream:
    """Records every request and answers per URL path.

    A path maps to (status, body, headers) or to an exception instance to raise.
    Unconfigured paths answer 200 with {"path": <path>}.
    """

    def __init__(self):
        self.requests = []
        self.responses = {}

    def respond(self, path, status=200, body=None, headers=None):
        self.responses[path] = (status, body, headers)

    def fail(self, path, exc=None):
        self.responses[path] = exc or httpx.ConnectError("connection refused")

    def calls_to(self, path):
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request):
        self.requests.append(request)
        spec = self.responses.get(request.url.path)
        if isinstance(spec, Exception):
            raise spec
        if spec is None:
            return httpx.Response(200, json={"path": request.url.path})
        status, body, headers = spec
        if body is None:
            return httpx.Response(status, headers=headers)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    def transport(self):
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        node_env="test",
        rates_api_url=UPSTREAM + RATES_PATH,
        damascus_history_api_url=UPSTREAM + HISTORY_PATHS["damascus"],
        aleppo_history_api_url=UPSTREAM + HISTORY_PATHS["aleppo"],
        idlib_history_api_url=UPSTREAM + HISTORY_PATHS["idlib"],
        http_timeout_seconds=2.0,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def cache_store(clock):
    return CacheStore(cache_duration=timedelta(minutes=15), clock=clock)


@pytest.fixture
def upstream_client(upstream):
    return UpstreamClient(timeout=2.0, transport=upstream.transport())


@pytest.fixture
def app(settings, cache_store, upstream_client):
    return create_app(settings, cache_store=cache_store, upstream=upstream_client)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
