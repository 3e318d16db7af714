from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from lirat_proxy.services.errors import FetchFailed, ProxyError, UnknownCategory

logger = logging.getLogger("lirat_proxy.errors")


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def unknown_category_handler(request: Request, exc: UnknownCategory):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message},
    )


def fetch_failed_handler(request: Request, exc: FetchFailed):  # type: ignore
    logger.error("%s (key=%s)", exc.message, exc.key)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message},
    )


def proxy_error_handler(request: Request, exc: ProxyError):  # type: ignore
    # UpstreamError is recovered inside the fetch service; reaching here is a bug.
    logger.error("unrecovered %s: %s", exc.kind.value, exc.message)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"error": exc.message},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )
