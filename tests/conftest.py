"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The PostGIS ``location`` column is mirrored as
a plain String column in the test model; repositories never select it.
"""

import math
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, func
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from poifinder.domain.entities import Entity, GeoPoint, NearbyResult
from poifinder.domain.enums import EntityKind, FuelProduct


# ── Geometry helpers ──────────────────────────────────────────────────

SEOUL_CITY_HALL = GeoPoint(37.5665, 126.9780)

_METERS_PER_DEGREE = 6_371_000.0 * math.pi / 180


def offset(point: GeoPoint, north_m: float = 0.0, east_m: float = 0.0) -> GeoPoint:
    """Point ``north_m`` / ``east_m`` metres away (flat approximation)."""
    lat = point.latitude + north_m / _METERS_PER_DEGREE
    lng = point.longitude + east_m / (
        _METERS_PER_DEGREE * math.cos(math.radians(point.latitude))
    )
    return GeoPoint(lat, lng)


def make_entity(
    id: str,
    price: Optional[float] = None,
    location: Optional[GeoPoint] = SEOUL_CITY_HALL,
    kind: EntityKind = EntityKind.FUEL_STATION,
    prices: Optional[dict] = None,
    **attributes,
) -> Entity:
    """Stations default to quoting ``price`` as their gasoline price."""
    if prices is None:
        prices = {}
        if kind is EntityKind.FUEL_STATION and price is not None:
            prices[FuelProduct.GASOLINE.value] = price
    return Entity(
        id=id,
        name=f"Entity {id}",
        kind=kind,
        location=location,
        price=price,
        attributes=attributes,
        prices=prices,
    )


def nearby(id: str, price: Optional[float], distance_m: float) -> NearbyResult:
    return NearbyResult(entity=make_entity(id, price), distance_m=distance_m)


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class TestBase(DeclarativeBase):
    pass


# Mirror the production model but without the PostGIS Geometry column
# (SQLite doesn't support it).

class PointOfInterestRow(TestBase):
    __tablename__ = "points_of_interest"
    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(20), nullable=False)
    external_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    brand = Column(String(64), nullable=True)
    location = Column(String, nullable=True)  # stub for Geometry
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    price = Column(Float, nullable=True)
    prices = Column(JSON, nullable=False, default=dict)
    attributes = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test; yields a session factory."""
    engine = create_async_engine(
        TEST_DB_URL, echo=False, poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(TestBase.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def scenario_entities() -> list[Entity]:
    """A at the centre, B ~900 m north, C ~1200 m north, D unlocated."""
    return [
        make_entity("A", 1500, SEOUL_CITY_HALL),
        make_entity("B", 1400, offset(SEOUL_CITY_HALL, north_m=900)),
        make_entity("C", 1000, offset(SEOUL_CITY_HALL, north_m=1200)),
        make_entity("D", 900, None),
    ]
