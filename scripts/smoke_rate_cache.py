"""Smoke script for the response cache.

Demonstrates, against an in-process fake upstream (no network):
 1. First access fetches from upstream and caches.
 2. Second access within the cache duration is served from cache.
 3. force=true refetches even though the entry is still valid.
 4. After the upstream goes down, the expired entry is still served (stale fallback).

NOTE: This is a lightweight diagnostic and not a formal test.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pprint import pprint

import httpx
from fastapi.testclient import TestClient

sys.path.append(os.getcwd())

from lirat_proxy.core.config import Settings  # noqa: E402
from lirat_proxy.main import create_app  # noqa: E402
from lirat_proxy.services.cache_store import CacheStore  # noqa: E402
from lirat_proxy.services.http_client import UpstreamClient  # noqa: E402


def run():
    now = [datetime.now(timezone.utc)]
    state = {"calls": 0, "down": False}

    def handler(request: httpx.Request) -> httpx.Response:
        state["calls"] += 1
        if state["down"]:
            return httpx.Response(503, json={"error": "maintenance"})
        return httpx.Response(200, json={"usd": {"buy": 13000 + state["calls"]}})

    store = CacheStore(clock=lambda: now[0])
    app = create_app(
        Settings(_env_file=None),
        cache_store=store,
        upstream=UpstreamClient(transport=httpx.MockTransport(handler)),
    )
    client = TestClient(app)
    out = {}

    out["initial"] = client.get("/api/rates").json()
    out["second"] = client.get("/api/rates").json()
    out["calls_after_second"] = state["calls"]

    out["forced"] = client.get("/api/rates", params={"force": "true"}).json()
    out["calls_after_forced"] = state["calls"]

    # Backdate past the cache duration and take the upstream down
    now[0] = now[0] + store.cache_duration + timedelta(seconds=5)
    state["down"] = True
    resp = client.get("/api/rates")
    out["stale_fallback"] = {"status": resp.status_code, "body": resp.json()}
    out["fetched_at"] = store.get("rates").fetched_at.isoformat()

    pprint(out)


if __name__ == "__main__":
    run()
