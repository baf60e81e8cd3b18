"""Planar and spherical geometry predicates on lon/lat points."""

import math
from collections.abc import Sequence

from .models import Point

EARTH_RADIUS_KM = 6371.0


def haversine_km(p0: Point, p1: Point) -> float:
    """Great-circle distance between two points on a sphere of radius 6371 km."""
    d_lat = math.radians(p1.lat - p0.lat)
    d_lon = math.radians(p1.lon - p0.lon)
    lat0 = math.radians(p0.lat)
    lat1 = math.radians(p1.lat)

    a = math.sin(d_lat / 2) ** 2 + math.sin(d_lon / 2) ** 2 * math.cos(lat0) * math.cos(lat1)
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def segments_intersect(p0: Point, p1: Point, q0: Point, q1: Point) -> bool:
    """Return True if segment p0-p1 meets segment q0-q1.

    Coordinates are treated as planar (lon = x, lat = y). Parallel and
    collinear segments report no intersection, even when they overlap.
    """
    s1_x = p1.lon - p0.lon
    s1_y = p1.lat - p0.lat
    s2_x = q1.lon - q0.lon
    s2_y = q1.lat - q0.lat

    denom = -s2_x * s1_y + s1_x * s2_y
    if denom == 0:
        return False

    dx = p0.lon - q0.lon
    dy = p0.lat - q0.lat
    s = (-s1_y * dx + s1_x * dy) / denom
    t = (s2_x * dy - s2_y * dx) / denom

    return 0 <= s <= 1 and 0 <= t <= 1


def point_in_polygon(point: Point, ring: Sequence[Point]) -> bool:
    """Even-odd ray casting test against a polygon's outer ring."""
    inside = False
    n = len(ring)
    j = n - 1
    for i in range(n):
        xi, yi = ring[i].lon, ring[i].lat
        xj, yj = ring[j].lon, ring[j].lat

        if (yi > point.lat) != (yj > point.lat) and point.lon < (xj - xi) * (point.lat - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


def segment_intersects_polygon(p0: Point, p1: Point, ring: Sequence[Point]) -> bool:
    """Return True if segment p0-p1 meets any edge of the ring."""
    n = len(ring)
    j = n - 1
    for i in range(n):
        if segments_intersect(p0, p1, ring[j], ring[i]):
            return True
        j = i

    return False
