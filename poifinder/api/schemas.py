"""Pydantic response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from poifinder.domain.enums import EntityKind, FuelProduct, RankMode
from poifinder.domain.ranking import RankedEntry, RankedList


# ── Responses ─────────────────────────────────────────────────────────


class CenterResponse(BaseModel):
    lat: float
    lng: float


class SavingsResponse(BaseModel):
    total_savings: float
    travel_cost: int
    net_savings: float
    is_worth_it: bool

    model_config = {"from_attributes": True}


class RankedEntryResponse(BaseModel):
    id: str
    name: str
    brand: Optional[str] = None
    lat: float
    lng: float
    price: Optional[float] = None
    distance_m: float = Field(..., ge=0)
    savings: Optional[SavingsResponse] = None
    attributes: dict[str, Any] = {}

    @classmethod
    def from_entry(cls, entry: RankedEntry) -> "RankedEntryResponse":
        entity = entry.entity
        return cls(
            id=entity.id,
            name=entity.name,
            brand=entity.brand,
            lat=entity.location.latitude,
            lng=entity.location.longitude,
            price=entity.price,
            distance_m=round(entry.distance_m, 1),
            savings=(
                SavingsResponse.model_validate(entry.savings)
                if entry.savings
                else None
            ),
            attributes=dict(entity.attributes),
        )


class RankedListResponse(BaseModel):
    kind: EntityKind
    mode: RankMode
    fuel: Optional[FuelProduct] = None
    center: CenterResponse
    radius_m: float
    average_price: float
    total: int
    best: Optional[RankedEntryResponse] = None
    results: list[RankedEntryResponse] = []

    @classmethod
    def build(
        cls,
        kind: EntityKind,
        center: CenterResponse,
        radius_m: float,
        ranked: RankedList,
        fuel: Optional[FuelProduct] = None,
    ) -> "RankedListResponse":
        results = [RankedEntryResponse.from_entry(e) for e in ranked]
        return cls(
            kind=kind,
            mode=ranked.mode,
            fuel=fuel,
            center=center,
            radius_m=radius_m,
            average_price=ranked.average_price,
            total=len(results),
            best=results[0] if results else None,
            results=results,
        )


class SnapshotStatusResponse(BaseModel):
    kind: EntityKind
    loaded: bool
    count: int
    version: Optional[str] = None
    loaded_at: Optional[datetime] = None


class ReloadResponse(BaseModel):
    reloaded: bool
    snapshots: list[SnapshotStatusResponse] = []


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
