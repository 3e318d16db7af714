from __future__ import annotations

import logging
from typing import Any, Optional

from .cache_store import CacheStore
from .categories import Category, CategoryResolver
from .errors import FetchFailed, UpstreamError
from .http_client import UpstreamClient

"""Fetch-or-serve orchestration (the proxy's only real decision logic).

Per request there are two states:
    serve cached  -> a valid entry exists and the caller did not force a refresh
    must fetch    -> anything else; on upstream failure fall back to whatever
                     entry exists (stale is fine), else raise FetchFailed.

Concurrent requests for the same expired key are not coalesced; each one
fetches and the last successful write wins.
"""

logger = logging.getLogger("lirat_proxy.fetch")


class FetchService:
    def __init__(
        self,
        cache: CacheStore,
        upstream: UpstreamClient,
        categories: CategoryResolver,
    ):
        self._cache = cache
        self._upstream = upstream
        self._categories = categories

    @property
    def cache(self) -> CacheStore:
        return self._cache

    async def fetch_or_serve(
        self,
        key: str,
        upstream_url: str,
        force_refresh: bool = False,
        failure_message: Optional[str] = None,
    ) -> Any:
        if not force_refresh:
            # Single read so a concurrent clear cannot slip between check and use.
            entry = self._cache.get(key)
            if entry is not None and self._cache.is_fresh(entry):
                logger.debug("cache hit", extra={"cache_key": key})
                return entry.payload

        try:
            payload = await self._upstream.fetch(upstream_url)
        except UpstreamError as e:
            logger.warning(
                "upstream fetch failed: %s",
                e.cause or e,
                extra={"cache_key": key, "url": upstream_url},
            )
            stale = self._cache.get(key)
            if stale is not None:
                logger.info(
                    "serving stale cache entry from %s",
                    stale.fetched_at.isoformat(),
                    extra={"cache_key": key},
                )
                return stale.payload
            raise FetchFailed(key, failure_message or f"Failed to fetch {key}", e) from e

        self._cache.put(key, payload)
        logger.debug("cache refreshed", extra={"cache_key": key})
        return payload

    async def fetch_category(self, category: Category, force_refresh: bool = False) -> Any:
        return await self.fetch_or_serve(
            category.key,
            category.url,
            force_refresh,
            failure_message=category.failure_message,
        )

    async def latest_rates(self, force_refresh: bool = False) -> Any:
        return await self.fetch_category(self._categories.rates(), force_refresh)

    async def history(self, city: str, force_refresh: bool = False) -> Any:
        # Resolution raises UnknownCategory before the cache or upstream is touched.
        category = self._categories.history(city)
        return await self.fetch_category(category, force_refresh)

    def clear_cache(self) -> int:
        removed = self._cache.clear_all()
        logger.info("cache cleared (%d entries)", removed)
        return removed
