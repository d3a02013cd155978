"""
Admin / observability endpoints
===============================

GET  /api/v1/admin/health          -- simple health check
GET  /api/v1/admin/snapshot        -- what each entity store currently holds
POST /api/v1/admin/snapshot/reload -- force a snapshot refresh cycle
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from poifinder.api.dependencies import get_stores
from poifinder.api.middleware import limiter
from poifinder.api.schemas import (
    HealthResponse,
    ReloadResponse,
    SnapshotStatusResponse,
)
from poifinder.config import settings
from poifinder.domain.enums import EntityKind
from poifinder.domain.store import EntityStore
from poifinder.workers import refresher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _status(stores: dict[EntityKind, EntityStore]) -> list[SnapshotStatusResponse]:
    return [
        SnapshotStatusResponse(
            kind=kind,
            loaded=store.is_loaded,
            count=len(store),
            version=store.version,
            loaded_at=store.loaded_at,
        )
        for kind, store in stores.items()
    ]


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()


@router.get(
    "/snapshot",
    response_model=list[SnapshotStatusResponse],
    summary="Entity snapshot status per kind",
)
@limiter.limit(settings.rate_limit)
async def snapshot_status(
    request: Request,
    stores: dict[EntityKind, EntityStore] = Depends(get_stores),
):
    return _status(stores)


@router.post(
    "/snapshot/reload",
    response_model=ReloadResponse,
    summary="Reload entity snapshots from the database",
)
@limiter.limit("10/minute")
async def reload_snapshot(
    request: Request,
    stores: dict[EntityKind, EntityStore] = Depends(get_stores),
):
    try:
        reloaded = await refresher.run_refresh_cycle(stores, force=True)
    except Exception as exc:
        logger.exception("Forced snapshot reload failed")
        raise HTTPException(
            status_code=503, detail=f"Snapshot reload failed: {exc}"
        ) from exc
    return ReloadResponse(reloaded=reloaded, snapshots=_status(stores))
