import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import IO, Any, Dict, Optional

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

REQUEST_ID_HEADER = "X-Request-ID"
_OWNED = "_lirat_proxy_handler"


class RequestContextFilter(logging.Filter):
    """Stamp each record with the current request id and the service name."""

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = request_id_ctx.get() or "-"
        record.service = self.service
        return True


class JsonFormatter(logging.Formatter):
    # Attributes passed via ``extra=`` that are copied into the JSON line.
    _EXTRA_FIELDS = ("cache_key", "url", "method", "path", "status", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        base: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "service": getattr(record, "service", "-"),
            "request_id": getattr(record, "request_id", "-"),
        }
        for field in self._EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                base[field] = value
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


# Loggers that would duplicate what the proxy already reports: httpx logs each
# upstream call, uvicorn.access each inbound one (see request_context_middleware).
NOISY_LOGGERS = ("httpx", "uvicorn.access")


def init_logging(
    debug: bool = False,
    *,
    service: str = "lirat-proxy",
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Install the JSON handler on the root logger and return it.

    Safe to call once per create_app: a handler installed by an earlier call is
    replaced, handlers installed by anyone else (pytest, uvicorn) are left alone.
    """
    root = logging.getLogger()
    for existing in [h for h in root.handlers if getattr(h, _OWNED, False)]:
        root.removeHandler(existing)

    level = logging.DEBUG if debug else logging.INFO
    root.setLevel(level)
    handler = logging.StreamHandler(stream or sys.stdout)
    setattr(handler, _OWNED, True)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter(service))
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


async def request_context_middleware(request, call_next):  # type: ignore
    """Tag the request with an id, echo it back, and log a one-line summary."""
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = request_id_ctx.set(rid)
    logger = logging.getLogger("lirat_proxy.request")
    started = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        response.headers[REQUEST_ID_HEADER] = rid
        return response
    finally:
        logger.info(
            "request handled",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        request_id_ctx.reset(token)
