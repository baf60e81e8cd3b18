"""Flood-zone lookups used while building the route graph."""

from collections.abc import Iterable
from typing import Protocol

from .geometry import point_in_polygon, segment_intersects_polygon
from .models import FloodZone, Point


class HazardLookup(Protocol):
    """What the graph builder needs to know about unsafe areas."""

    def contains(self, point: Point) -> bool: ...

    def crosses(self, p0: Point, p1: Point) -> bool: ...


class HazardIndex:
    """Linear scan over the outer rings of every flood zone.

    Fine for tens of zones; a spatially indexed lookup can stand in for
    this class anywhere a ``HazardLookup`` is accepted.
    """

    def __init__(self, zones: Iterable[FloodZone]):
        self._rings = tuple(zone.outer_ring for zone in zones)

    def __len__(self) -> int:
        return len(self._rings)

    def contains(self, point: Point) -> bool:
        return any(point_in_polygon(point, ring) for ring in self._rings)

    def crosses(self, p0: Point, p1: Point) -> bool:
        return any(segment_intersects_polygon(p0, p1, ring) for ring in self._rings)
