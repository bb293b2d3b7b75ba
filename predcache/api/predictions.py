"""Prediction API routes."""

from datetime import datetime, timedelta
from typing import Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from predcache.config import get_settings
from predcache.database import commit, get_db
from predcache.models import Category, Sport
from predcache.schemas import (
    CacheStatsResponse,
    PredictionListResponse,
    PredictionResponse,
    ReclassifyRequest,
    ViewerTierEnum,
)
from predcache.services import PredictionCacheService, PredictionQueryService
from predcache.services.query_service import page_count

router = APIRouter(prefix="/predictions", tags=["predictions"])

settings = get_settings()


def viewer_tier(
    x_viewer_tier: ViewerTierEnum = Header(ViewerTierEnum.ANONYMOUS),
) -> ViewerTierEnum:
    """Tier claim set by the auth layer in front of this service."""
    return x_viewer_tier


@router.get("", response_model=PredictionListResponse)
async def list_predictions(
    category: Category | None = None,
    sport: Sport | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1),
    include_past: bool = True,
    tier: ViewerTierEnum = Depends(viewer_tier),
    db: AsyncSession = Depends(get_db),
):
    """List predictions visible to the viewer, best-ranked first."""
    service = PredictionQueryService(db)
    page_size = service.clamp_page_size(page_size)
    items, total = await service.list(
        category, sport, tier, page=page, page_size=page_size, include_past=include_past
    )
    return PredictionListResponse(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.get("/stats", response_model=CacheStatsResponse)
async def get_cache_stats(
    db: AsyncSession = Depends(get_db),
):
    """Get cache size and freshness."""
    service = PredictionCacheService(db)
    stats = await service.stats(timedelta(minutes=settings.stale_after_minutes))
    return CacheStatsResponse(
        total=stats.total,
        fresh=stats.fresh,
        stale=stats.stale,
        by_category=stats.by_category,
        stale_after_minutes=settings.stale_after_minutes,
    )


@router.get("/{match_id}", response_model=PredictionResponse)
async def get_prediction(
    match_id: int,
    tier: ViewerTierEnum = Depends(viewer_tier),
    db: AsyncSession = Depends(get_db),
):
    """Get the current prediction for a match."""
    service = PredictionQueryService(db)
    return await service.detail(match_id, tier)


@router.put("", response_model=PredictionResponse)
async def upsert_prediction(
    payload: dict[str, Any] = Body(...),
    reclassify: bool = False,
    db: AsyncSession = Depends(get_db),
):
    """Store a prediction, replacing the match's previous one."""
    cache = PredictionCacheService(db)
    stored = await cache.upsert(payload, reclassify=reclassify)
    await commit(db)
    return PredictionQueryService(db).to_response(stored)


@router.patch("/{match_id}/category", response_model=PredictionResponse)
async def reclassify_prediction(
    match_id: int,
    data: ReclassifyRequest,
    db: AsyncSession = Depends(get_db),
):
    """Change a stored prediction's category."""
    cache = PredictionCacheService(db)
    stored = await cache.reclassify(match_id, data.category)
    await commit(db)
    return PredictionQueryService(db).to_response(stored)


@router.delete("/{match_id}", status_code=204)
async def evict_prediction(
    match_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Evict a match's prediction."""
    cache = PredictionCacheService(db)
    evicted = await cache.evict(match_id)
    if not evicted:
        raise HTTPException(status_code=404, detail="Prediction not found")
    await commit(db)


@router.delete("")
async def purge_finished_predictions(
    before: datetime = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Evict predictions for fixtures that kicked off before `before`."""
    cache = PredictionCacheService(db)
    purged = await cache.purge_finished(before)
    await commit(db)
    return {"purged": purged}
