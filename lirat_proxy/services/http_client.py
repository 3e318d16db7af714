from __future__ import annotations

"""Upstream HTTP client: one GET, JSON out, ``UpstreamError`` on anything else.

No retries here; the fetch service falls back to stale cache instead. The
timeout is a deadline for the whole exchange (connect through body decode),
so an upstream trickling bytes cannot pin a request handler either.
"""
import asyncio
import time
from typing import Any, Callable, Optional

import httpx

from .errors import UpstreamError

CACHE_BUST_PARAM = "_t"


def epoch_millis() -> int:
    return int(time.time() * 1000)


class UpstreamClient:
    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        millis: Callable[[], int] = epoch_millis,
    ):
        self._timeout = timeout
        # Tests pass an httpx.MockTransport; production uses the default pool.
        self._transport = transport
        self._millis = millis

    @property
    def timeout(self) -> float:
        return self._timeout

    def cache_busted(self, base_url: str) -> httpx.URL:
        """``base_url`` with ``_t`` added; existing query parameters are kept."""
        return httpx.URL(base_url).copy_merge_params(
            {CACHE_BUST_PARAM: str(self._millis())}
        )

    async def _get_json(self, url: httpx.URL) -> Any:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.json()

    async def fetch(self, base_url: str) -> Any:
        try:
            return await asyncio.wait_for(
                self._get_json(self.cache_busted(base_url)), self._timeout
            )
        except (
            httpx.HTTPError,
            asyncio.TimeoutError,
            ValueError,
        ) as e:  # ValueError for JSON decode
            raise UpstreamError(base_url, e) from e
