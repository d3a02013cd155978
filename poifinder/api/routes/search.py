"""
Search endpoints
================

GET /api/v1/stations -- fuel stations near a point, ranked
GET /api/v1/parking  -- parking lots near a point, ranked

``radius`` is in kilometres and converted to metres here; the core only
ever sees metres.  Out-of-range coordinates, a non-positive radius or an
unknown ``mode`` / ``fuel`` are rejected with 422 before reaching the core.
``fuel`` picks which product price the stations are ranked on.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from poifinder.api.dependencies import get_ranking_engine, get_stores
from poifinder.api.middleware import limiter
from poifinder.api.schemas import (
    CenterResponse,
    ErrorResponse,
    RankedListResponse,
)
from poifinder.config import settings
from poifinder.domain.entities import DEFAULT_PRODUCT, GeoPoint
from poifinder.domain.enums import EntityKind, FuelProduct, RankMode
from poifinder.domain.nearby import NearbyQueryEngine, select_product
from poifinder.domain.ranking import RankingEngine
from poifinder.domain.store import EntityStore

router = APIRouter(tags=["search"])

_RESPONSES = {503: {"model": ErrorResponse, "description": "Data not loaded yet."}}


def _search(
    store: EntityStore,
    ranking: RankingEngine,
    lat: float,
    lng: float,
    radius_km: float,
    mode: RankMode,
    fuel: Optional[FuelProduct] = None,
) -> RankedListResponse:
    center = GeoPoint(lat, lng)
    radius_m = radius_km * 1000
    nearby = NearbyQueryEngine(store).find_nearby(center, radius_m)
    if fuel is not None:
        nearby = select_product(nearby, fuel)
    ranked = ranking.rank(nearby, mode)
    return RankedListResponse.build(
        kind=store.kind,
        center=CenterResponse(lat=lat, lng=lng),
        radius_m=radius_m,
        ranked=ranked,
        fuel=fuel,
    )


@router.get(
    "/stations",
    response_model=RankedListResponse,
    summary="Rank fuel stations around a point",
    responses=_RESPONSES,
)
@limiter.limit(settings.rate_limit)
async def search_stations(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(
        settings.default_radius_km,
        gt=0,
        le=settings.max_radius_km,
        description="Search radius in km.",
    ),
    mode: RankMode = Query(RankMode.PRICE),
    fuel: FuelProduct = Query(
        DEFAULT_PRODUCT, description="Fuel product code to rank prices by."
    ),
    stores: dict[EntityKind, EntityStore] = Depends(get_stores),
    ranking: RankingEngine = Depends(get_ranking_engine),
):
    return _search(
        stores[EntityKind.FUEL_STATION], ranking, lat, lng, radius, mode, fuel
    )


@router.get(
    "/parking",
    response_model=RankedListResponse,
    summary="Rank parking lots around a point",
    responses=_RESPONSES,
)
@limiter.limit(settings.rate_limit)
async def search_parking(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(
        settings.default_radius_km,
        gt=0,
        le=settings.max_radius_km,
        description="Search radius in km.",
    ),
    mode: RankMode = Query(RankMode.DISTANCE),
    stores: dict[EntityKind, EntityStore] = Depends(get_stores),
    ranking: RankingEngine = Depends(get_ranking_engine),
):
    return _search(
        stores[EntityKind.PARKING_LOT], ranking, lat, lng, radius, mode
    )
