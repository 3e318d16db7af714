import logging
from datetime import timedelta

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import cache, health, rates
from .routers.ui import build_ui_router
from .services.cache_store import CacheStore
from .services.categories import CategoryResolver
from .services.errors import FetchFailed, ProxyError, UnknownCategory
from .services.fetch_service import FetchService
from .services.http_client import UpstreamClient


def build_fetch_service(
    settings: Settings,
    cache_store: CacheStore | None = None,
    upstream: UpstreamClient | None = None,
) -> FetchService:
    # Explicit None checks: an empty CacheStore is falsy.
    if cache_store is None:
        cache_store = CacheStore(
            cache_duration=timedelta(milliseconds=settings.cache_duration_ms)
        )
    if upstream is None:
        upstream = UpstreamClient(timeout=settings.http_timeout_seconds)
    return FetchService(cache_store, upstream, CategoryResolver.from_settings(settings))


def create_app(
    settings_override: Settings | None = None,
    *,
    cache_store: CacheStore | None = None,
    upstream: UpstreamClient | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    cache_store / upstream: inject a store with a fake clock or a client with a
    mock transport. Otherwise one of each is created here and lives as long as
    the app.
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug, service=settings.app_name)

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.fetch_service = build_fetch_service(settings, cache_store, upstream)

    # Middleware (request id / structured logging), CORS outermost
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(UnknownCategory, errors.unknown_category_handler)
    app.add_exception_handler(FetchFailed, errors.fetch_failed_handler)
    app.add_exception_handler(ProxyError, errors.proxy_error_handler)
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(cache.router)

    if settings.production:
        # Catch-all, so it must come after every API router.
        app.include_router(build_ui_router(settings.static_dir))
        logging.getLogger("lirat_proxy").info(
            "serving static assets from %s", settings.static_dir
        )

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    app = create_app(settings)
    logging.getLogger("lirat_proxy").info("proxy server running on port %d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None)
