"""
SQLAlchemy ORM models  (maps to PostgreSQL + PostGIS).

Tables
------
* ``points_of_interest`` -- fuel stations and parking lots, already
  normalised; written by the import job, read once per snapshot load.

Indexes
-------
* **GIST** on ``location`` for ad-hoc spatial queries.
* **B-Tree** on ``kind`` (snapshot loads are per kind) and a unique
  ``(kind, external_id)`` pair so re-imports upsert instead of duplicating.
"""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from geoalchemy2 import Geometry

from .database import Base
from poifinder.domain.enums import EntityKind


class PointOfInterestModel(Base):
    __tablename__ = "points_of_interest"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(Enum(EntityKind), nullable=False)
    external_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    brand = Column(String(64), nullable=True)

    # Stored as PostGIS geometry for spatial indexing
    location = Column(Geometry("POINT", srid=4326), nullable=True)

    # Also stored as plain floats for fast snapshot loads (avoids ST_X / ST_Y)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Price the snapshot ranks on by default (gasoline for fuel stations)
    price = Column(Float, nullable=True)
    # Fuel product code -> price; empty for parking lots
    prices = Column(JSON, nullable=False, default=dict)
    attributes = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("kind", "external_id", name="uq_poi_kind_external_id"),
        Index("idx_poi_location", "location", postgresql_using="gist"),
        Index("idx_poi_kind", "kind"),
    )
