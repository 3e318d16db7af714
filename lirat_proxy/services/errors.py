from __future__ import annotations

"""Error taxonomy for the proxy.

Every failure the proxy can produce is a ``ProxyError`` tagged with an
``ErrorKind``:

    UNKNOWN_CATEGORY  caller asked for a city we do not proxy (HTTP 400)
    UPSTREAM_ERROR    a single upstream fetch failed; recovered via stale cache
    FETCH_FAILED      upstream failed and nothing was cached (HTTP 500)

The underlying cause travels both as ``__cause__`` (``raise ... from``) and as
the ``cause`` attribute so log lines can show it without walking the chain.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNKNOWN_CATEGORY = "unknown_category"
    UPSTREAM_ERROR = "upstream_error"
    FETCH_FAILED = "fetch_failed"


class ProxyError(Exception):
    kind: ErrorKind

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class UnknownCategory(ProxyError):
    kind = ErrorKind.UNKNOWN_CATEGORY

    def __init__(self, city: str):
        super().__init__(f"Unknown city: {city}")
        self.city = city


class UpstreamError(ProxyError):
    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Upstream request to {url} failed{detail}", cause)
        self.url = url


class FetchFailed(ProxyError):
    kind = ErrorKind.FETCH_FAILED

    def __init__(self, key: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.key = key
