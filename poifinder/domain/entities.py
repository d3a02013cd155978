"""
Domain entities and value objects.

Patterns used
-------------
- ``GeoPoint`` is an immutable **Value Object**.
- ``Entity`` is the canonical, normalised point of interest.  Vendor field
  names never reach this module; see ``infrastructure.normalize``.
- ``NearbyResult`` pairs an entity with its distance from *one* query's
  centre.  It is transient and must never be cached by entity id.

Fuel stations report one price per product (``prices``).  ``price`` is the
one ranking looks at: the gasoline price by default, or whichever product
``for_product`` selected.  Parking lots only ever have ``price``.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .enums import EntityKind, FuelProduct

DEFAULT_PRODUCT = FuelProduct.GASOLINE


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0


def _check_price(entity_id: str, price: float) -> None:
    if not math.isfinite(price):
        raise ValueError(f"Entity {entity_id!r} has a non-finite price")
    if price < 0:
        raise ValueError(f"Entity {entity_id!r} has a negative price")


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Entity:
    id: str
    name: str
    kind: EntityKind = EntityKind.FUEL_STATION
    location: Optional[GeoPoint] = None
    price: Optional[float] = None
    brand: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    prices: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.price is not None:
            _check_price(self.id, self.price)
        for product, price in self.prices.items():
            FuelProduct(product)
            _check_price(self.id, price)

    @property
    def has_price(self) -> bool:
        return self.price is not None

    def for_product(self, product: FuelProduct) -> Entity:
        """Copy whose ``price`` is the price of ``product`` (None if unreported).

        An entity with no per-product prices keeps ``price`` as its default
        product price.
        """
        code = FuelProduct(product).value
        if not self.prices and code == DEFAULT_PRODUCT.value:
            return self
        return dataclasses.replace(self, price=self.prices.get(code))


@dataclass(frozen=True)
class NearbyResult:
    entity: Entity
    distance_m: float
