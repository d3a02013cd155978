"""
H3 Spatial Pre-filter
=====================

Each entity snapshot bins its located entities into H3 hexagons.  A nearby
query then only measures entities whose cell lies within ``k`` rings of the
centre cell instead of every entity in the snapshot.

Ring count
----------
  k = ceil(radius / (0.5 x average_edge)) + 2

Neighbouring H3 centres are ~sqrt(3) x edge apart and real cells deviate
from the average edge by well under 2x, so ``0.5 x average_edge`` never
overstates the distance covered per ring.  The ``+ 2`` absorbs the query
point and the target each sitting anywhere inside their own cells.  The
candidate set is therefore a superset of the true answer; the exact
Haversine check in the query engine decides membership.

Complexity
----------
* Index build:  O(N)              -- one H3 call per entity
* Candidates:   O(k^2 + m log m)  -- disk enumeration + ordering m hits
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Optional, Sequence

import h3

from .entities import Entity, GeoPoint


def point_h3_cell(point: GeoPoint, resolution: int = 7) -> str:
    """Map a geo-point to an H3 hexagonal cell index.  O(1)."""
    return h3.latlng_to_cell(point.latitude, point.longitude, resolution)


def ring_count(radius_m: float, resolution: int = 7) -> int:
    edge_m = h3.average_hexagon_edge_length(resolution, unit="m")
    return math.ceil(radius_m / (0.5 * edge_m)) + 2


class CellIndex:
    """Positions of snapshot entities grouped by H3 cell."""

    def __init__(
        self,
        entities: Sequence[Entity],
        resolution: int = 7,
        max_ring: int = 30,
    ):
        self.resolution = resolution
        self.max_ring = max_ring
        buckets: dict[str, list[int]] = defaultdict(list)
        for position, entity in enumerate(entities):
            if entity.location is None:
                continue
            buckets[point_h3_cell(entity.location, resolution)].append(position)
        self._buckets = dict(buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def candidates(self, center: GeoPoint, radius_m: float) -> Optional[list[int]]:
        """
        Return snapshot positions worth measuring, in snapshot order, or
        ``None`` when the radius is too wide for the disk to pay off and
        the caller should scan everything.
        """
        k = ring_count(radius_m, self.resolution)
        if k > self.max_ring:
            return None

        origin = point_h3_cell(center, self.resolution)
        hits: list[int] = []
        for cell in h3.grid_disk(origin, k):
            hits.extend(self._buckets.get(cell, ()))
        hits.sort()
        return hits
