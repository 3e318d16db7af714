from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Path, Query

from lirat_proxy.models import ErrorBody
from lirat_proxy.services.fetch_service import FetchService
from .deps import get_fetch_service, parse_force

"""Proxied lirat.org data.

Endpoints:
    - GET /api/rates?force=true          -> latest exchange rates
    - GET /api/history/{city}?force=true -> historical rates for damascus/aleppo/idlib

Payloads are passed through untouched. Failures map to JSON ``{"error": ...}``
bodies via the handlers in core.errors (400 unknown city, 500 no data at all).
"""

router = APIRouter(prefix="/api", tags=["rates"])

_FORCE = Query(None, description="'true' bypasses a still-valid cache entry")


@router.get(
    "/rates",
    summary="Latest exchange rates (cached)",
    responses={500: {"model": ErrorBody}},
)
async def latest_rates(
    force: Optional[str] = _FORCE,
    svc: FetchService = Depends(get_fetch_service),
) -> Any:
    return await svc.latest_rates(force_refresh=parse_force(force))


@router.get(
    "/history/{city}",
    summary="Historical rates for a city (cached)",
    responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
async def city_history(
    city: str = Path(..., description="City name", examples=["damascus", "aleppo", "idlib"]),
    force: Optional[str] = _FORCE,
    svc: FetchService = Depends(get_fetch_service),
) -> Any:
    return await svc.history(city, force_refresh=parse_force(force))
