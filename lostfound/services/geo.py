"""
Great-circle geometry for radius searches.

Distances are haversine distances on a spherical Earth. Points are
``(latitude, longitude)`` pairs in signed decimal degrees; a point with a
missing coordinate never matches a radius query.
"""
import math
from typing import NamedTuple, Optional, Tuple

EARTH_RADIUS_KM = 6371.0
# Slack added to prefilter bounds so rounding never drops a boundary point
BOX_PADDING_DEG = 1e-6

Point = Tuple[Optional[float], Optional[float]]


class BoundingBox(NamedTuple):
    min_lat: float
    max_lat: float
    # None when the circle reaches a pole or wraps the antimeridian
    min_lon: Optional[float]
    max_lon: Optional[float]


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance between two points in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # cos(central angle) = 1 - 2a; rounding can push it just outside [-1, 1]
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(a))


def has_coordinates(point: Point) -> bool:
    return point[0] is not None and point[1] is not None


def within_radius(center: Point, point: Point, radius_km: float) -> bool:
    if not has_coordinates(point):
        return False
    return distance_km(center[0], center[1], point[0], point[1]) <= radius_km


def bounding_box(center: Point, radius_km: float) -> BoundingBox:
    """Conservative lat/lon rectangle containing every point within ``radius_km``.

    Used as a cheap store-side prefilter; the exact check is ``within_radius``.
    """
    lat, lon = center
    angular = radius_km / EARTH_RADIUS_KM
    delta_lat = math.degrees(angular) + BOX_PADDING_DEG
    min_lat = lat - delta_lat
    max_lat = lat + delta_lat

    if min_lat <= -90 or max_lat >= 90 or angular >= math.pi / 2:
        return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), None, None)

    ratio = math.sin(angular) / math.cos(math.radians(lat))
    if ratio >= 1:
        return BoundingBox(min_lat, max_lat, None, None)

    delta_lon = math.degrees(math.asin(ratio)) + BOX_PADDING_DEG
    min_lon = lon - delta_lon
    max_lon = lon + delta_lon
    if min_lon < -180 or max_lon > 180:
        return BoundingBox(min_lat, max_lat, None, None)

    return BoundingBox(min_lat, max_lat, min_lon, max_lon)
