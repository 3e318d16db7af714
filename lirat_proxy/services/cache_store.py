from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

"""In-memory response cache shared by all request handlers.

Design:
    - One entry per key; a successful fetch overwrites, never appends.
    - Entries are never evicted. Expiry only changes what ``is_valid`` reports,
      so an expired entry is still available as a stale fallback.
    - ``clear_all`` is the only way entries disappear.
    - A single lock guards the map; entries are frozen so readers never see a
      half-written one.

Lifecycle: ``create_app`` builds one store per application instance and hangs
it off ``app.state``; tests build their own with a controllable clock.
"""

DEFAULT_CACHE_DURATION = timedelta(minutes=15)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    fetched_at: datetime


class CacheStore:
    def __init__(
        self,
        cache_duration: timedelta = DEFAULT_CACHE_DURATION,
        clock: Clock = utc_now,
    ):
        self._ttl = cache_duration
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def cache_duration(self) -> timedelta:
        return self._ttl

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(key=key, payload=payload, fetched_at=self._clock())
        with self._lock:
            self._entries[key] = entry
        return entry

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    def is_valid(self, key: str) -> bool:
        entry = self.get(key)
        return entry is not None and self.is_fresh(entry)

    def clear_all(self) -> int:
        """Drop every entry; returns how many were removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries = {}
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
