from fastapi import APIRouter, Depends

from lirat_proxy.models import CacheClearResult
from lirat_proxy.services.fetch_service import FetchService
from .deps import get_fetch_service

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.post(
    "/clear", response_model=CacheClearResult, summary="Drop every cached response"
)
async def clear_cache(svc: FetchService = Depends(get_fetch_service)) -> CacheClearResult:
    svc.clear_cache()
    return CacheClearResult()
