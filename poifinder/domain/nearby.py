"""
Nearby Query Engine
===================

1. Take the store's current snapshot (``DataUnavailable`` if not ready).
2. Ask the H3 index for candidate positions near the centre, or scan the
   whole snapshot when the radius is too wide for the index.
3. Skip entities without a location.
4. Keep entities whose Haversine distance is ``<= radius`` (inclusive).

Results come out in snapshot order; ordering by any criterion is the
ranking engine's job.

``select_product`` swaps each station's ranked price for one fuel product.

Complexity: O(m) distance computations, m = candidates (<= N).
"""

from __future__ import annotations

import logging

from .distance import distance
from .entities import GeoPoint, NearbyResult
from .enums import FuelProduct
from .store import EntityStore

logger = logging.getLogger(__name__)


class NearbyQueryEngine:
    def __init__(self, store: EntityStore, use_index: bool = True):
        self.store = store
        self.use_index = use_index

    def find_nearby(
        self, center: GeoPoint, radius_m: float
    ) -> list[NearbyResult]:
        snap = self.store.snapshot()
        if radius_m <= 0:
            return []

        entities = snap.entities
        positions = (
            snap.index.candidates(center, radius_m) if self.use_index else None
        )
        if positions is None:
            positions = range(len(entities))

        results: list[NearbyResult] = []
        for position in positions:
            entity = entities[position]
            if entity.location is None:
                continue
            d = distance(center, entity.location)
            if d <= radius_m:
                results.append(NearbyResult(entity=entity, distance_m=d))

        logger.debug(
            "%s nearby (%.5f, %.5f) r=%.0fm: %d of %d",
            self.store.kind.value,
            center.latitude,
            center.longitude,
            radius_m,
            len(results),
            len(entities),
        )
        return results


def select_product(
    results: list[NearbyResult], product: FuelProduct
) -> list[NearbyResult]:
    """Re-price fuel-station results with ``product`` before ranking."""
    return [
        NearbyResult(entity=r.entity.for_product(product), distance_m=r.distance_m)
        for r in results
    ]
