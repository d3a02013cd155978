"""
Distance calculation using the Haversine formula.

Assumption
----------
Great-circle distance on a sphere of radius 6,371 km is used for every
nearby query.  Road distance belongs to the route service the client calls
when drawing a path; it is never an input to filtering or ranking.

Complexity: O(1) per call.
"""

import math

from .entities import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **meters** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    h = min(1.0, h)  # float drift near antipodes
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Distance in meters between two validated ``GeoPoint`` values."""
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)
