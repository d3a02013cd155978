"""
Boundary normalisation of raw point-of-interest records.

Upstream feeds spell the same concept differently (``PKLT_NM`` vs
``pklt_nm``, ``LAT`` vs ``latitude``).  Lookups here are case-insensitive
and try a list of aliases; whatever is not mapped onto ``Entity`` fields is
kept as lower-case pass-through attributes.

Missing data conventions
------------------------
* Coordinates that are absent, unparsable, ``0/0`` or out of range leave the
  entity without a location.  It is stored but never returned by queries.
* Fuel prices ``<= 0`` mean "not reported".  A parking fee of ``0`` means
  free and is kept as a price of zero.  Non-finite numbers are unparsable.

Fuel products
-------------
A station row prices one product (``PRODCD``, gasoline when absent).  Feeds
queried per product return the same station once per product;
``normalize_records`` folds those rows into one entity with every price.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Iterable, Mapping, Optional

from poifinder.domain.entities import (
    DEFAULT_PRODUCT,
    Entity,
    GeoPoint,
    is_valid_coordinate,
)
from poifinder.domain.enums import EntityKind, FuelProduct

logger = logging.getLogger(__name__)

ID_KEYS = {
    EntityKind.FUEL_STATION: ("uni_id", "id", "station_id"),
    EntityKind.PARKING_LOT: ("pklt_cd", "id", "lot_id"),
}
NAME_KEYS = {
    EntityKind.FUEL_STATION: ("os_nm", "name"),
    EntityKind.PARKING_LOT: ("pklt_nm", "name"),
}
PRICE_KEYS = {
    EntityKind.FUEL_STATION: ("price",),
    EntityKind.PARKING_LOT: ("prk_crg", "price", "fee"),
}
BRAND_KEYS = {
    EntityKind.FUEL_STATION: ("poll_div_cd", "brand"),
    EntityKind.PARKING_LOT: ("oper_se_nm", "brand"),
}
LAT_KEYS = ("wgs84_lat", "latitude", "lat")
LNG_KEYS = ("wgs84_lng", "longitude", "lot", "lng", "lon")
PRODUCT_KEYS = ("prodcd", "product")

# Vendor-internal fields that must not leak as attributes.
_DROP_KEYS = {"raw_data", "geocoded", "gis_x_coor", "gis_y_coor", "distance"}


def _lower_keys(record: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in record.items():
        # First spelling wins when a record carries both cases.
        out.setdefault(str(key).lower(), value)
    return out


def _first(fields: Mapping[str, Any], keys: Iterable[str]) -> tuple[Optional[str], Any]:
    for key in keys:
        value = fields.get(key)
        if value is not None and value != "":
            return key, value
    return None, None


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_location(lat: Any, lng: Any) -> Optional[GeoPoint]:
    latitude, longitude = _to_float(lat), _to_float(lng)
    if latitude is None or longitude is None:
        return None
    if latitude == 0 and longitude == 0:
        return None
    if not is_valid_coordinate(latitude, longitude):
        return None
    return GeoPoint(latitude, longitude)


def parse_price(value: Any, kind: EntityKind) -> Optional[float]:
    price = _to_float(value)
    if price is None or price < 0:
        return None
    if kind is EntityKind.FUEL_STATION and price == 0:
        return None
    return price


def parse_product(value: Any) -> FuelProduct:
    if value is None or value == "":
        return DEFAULT_PRODUCT
    try:
        return FuelProduct(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"unknown fuel product {value!r}") from None


def normalize_record(record: Mapping[str, Any], kind: EntityKind) -> Entity:
    """Convert one raw record into an ``Entity``; ``ValueError`` if it has no id."""
    fields = _lower_keys(record)

    id_key, raw_id = _first(fields, ID_KEYS[kind])
    if raw_id is None:
        raise ValueError(f"{kind.value} record has no identifier")
    name_key, name = _first(fields, NAME_KEYS[kind])
    price_key, raw_price = _first(fields, PRICE_KEYS[kind])
    brand_key, brand = _first(fields, BRAND_KEYS[kind])
    lat_key, lat = _first(fields, LAT_KEYS)
    lng_key, lng = _first(fields, LNG_KEYS)

    consumed = {
        id_key, name_key, price_key, brand_key, lat_key, lng_key,
        *ID_KEYS[kind], *NAME_KEYS[kind], *PRICE_KEYS[kind],
        *BRAND_KEYS[kind], *LAT_KEYS, *LNG_KEYS,
    }

    price = parse_price(raw_price, kind)
    prices: dict[str, float] = {}
    if kind is EntityKind.FUEL_STATION:
        consumed.update(PRODUCT_KEYS)
        _, raw_product = _first(fields, PRODUCT_KEYS)
        product = parse_product(raw_product)
        if price is not None:
            prices[product.value] = price
        price = prices.get(DEFAULT_PRODUCT.value)

    attributes = {
        key: value
        for key, value in fields.items()
        if key not in consumed and key not in _DROP_KEYS
    }

    return Entity(
        id=str(raw_id),
        name=str(name) if name is not None else str(raw_id),
        kind=kind,
        location=parse_location(lat, lng),
        price=price,
        brand=str(brand) if brand is not None else None,
        attributes=attributes,
        prices=prices,
    )


def _merge_products(first: Entity, other: Entity) -> Entity:
    prices = {**other.prices, **first.prices}
    return dataclasses.replace(
        first, prices=prices, price=prices.get(DEFAULT_PRODUCT.value)
    )


def normalize_records(
    records: Iterable[Mapping[str, Any]], kind: EntityKind
) -> list[Entity]:
    """Normalise a batch, logging and skipping records that cannot be used.

    Station rows sharing an id are merged so each station appears once with
    all of its product prices.
    """
    by_id: dict[str, Entity] = {}
    skipped = 0
    for record in records:
        try:
            entity = normalize_record(record, kind)
        except ValueError as exc:
            skipped += 1
            logger.warning("Skipping %s record: %s", kind.value, exc)
            continue
        if entity.id in by_id and kind is EntityKind.FUEL_STATION:
            by_id[entity.id] = _merge_products(by_id[entity.id], entity)
        else:
            by_id.setdefault(entity.id, entity)
    if skipped:
        logger.info(
            "Normalised %d %s records (%d skipped)",
            len(by_id), kind.value, skipped,
        )
    return list(by_id.values())
