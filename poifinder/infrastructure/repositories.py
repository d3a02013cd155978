"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Reads return domain ``Entity`` objects; the
geometry column is never selected so snapshot loads stay plain SQL.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import PointOfInterestModel
from poifinder.domain.entities import Entity, GeoPoint
from poifinder.domain.enums import EntityKind

_SNAPSHOT_COLUMNS = (
    PointOfInterestModel.kind,
    PointOfInterestModel.external_id,
    PointOfInterestModel.name,
    PointOfInterestModel.brand,
    PointOfInterestModel.latitude,
    PointOfInterestModel.longitude,
    PointOfInterestModel.price,
    PointOfInterestModel.prices,
    PointOfInterestModel.attributes,
)


def _row_to_entity(row) -> Entity:
    location = None
    if row.latitude is not None and row.longitude is not None:
        location = GeoPoint(row.latitude, row.longitude)
    return Entity(
        id=row.external_id,
        name=row.name,
        kind=EntityKind(row.kind),
        location=location,
        price=row.price,
        brand=row.brand,
        attributes=dict(row.attributes or {}),
        prices=dict(row.prices or {}),
    )


class PointOfInterestRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all_by_kind(self) -> dict[EntityKind, list[Entity]]:
        """Every stored entity, grouped by kind, in primary-key order."""
        result = await self.session.execute(
            select(*_SNAPSHOT_COLUMNS).order_by(PointOfInterestModel.id)
        )
        grouped: dict[EntityKind, list[Entity]] = defaultdict(list)
        for row in result:
            entity = _row_to_entity(row)
            grouped[entity.kind].append(entity)
        return dict(grouped)

    async def get_by_kind(self, kind: EntityKind) -> list[Entity]:
        result = await self.session.execute(
            select(*_SNAPSHOT_COLUMNS)
            .where(PointOfInterestModel.kind == kind)
            .order_by(PointOfInterestModel.id)
        )
        return [_row_to_entity(row) for row in result]

    async def count_by_kind(self) -> dict[EntityKind, int]:
        result = await self.session.execute(
            select(PointOfInterestModel.kind, func.count()).group_by(
                PointOfInterestModel.kind
            )
        )
        return {EntityKind(kind): count for kind, count in result}

    async def upsert_many(self, entities: Iterable[Entity]) -> int:
        """Insert or update entities keyed by ``(kind, external_id)``."""
        from geoalchemy2.functions import ST_MakePoint, ST_SetSRID

        written = 0
        for entity in entities:
            existing = await self.session.execute(
                select(PointOfInterestModel).where(
                    PointOfInterestModel.kind == entity.kind,
                    PointOfInterestModel.external_id == entity.id,
                )
            )
            model = existing.scalar_one_or_none()
            if model is None:
                model = PointOfInterestModel(
                    kind=entity.kind, external_id=entity.id
                )
                self.session.add(model)

            model.name = entity.name
            model.brand = entity.brand
            model.price = entity.price
            model.prices = dict(entity.prices)
            model.attributes = dict(entity.attributes)
            if entity.location is not None:
                model.latitude = entity.location.latitude
                model.longitude = entity.location.longitude
                model.location = ST_SetSRID(
                    ST_MakePoint(
                        entity.location.longitude, entity.location.latitude
                    ),
                    4326,
                )
            else:
                model.latitude = model.longitude = model.location = None
            written += 1

        await self.session.flush()
        return written
