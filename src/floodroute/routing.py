"""Build-once road network and the point-to-point routing query."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .config import DEFAULT_SNAP_TOLERANCE_KM
from .geometry import haversine_km
from .graph import RouteGraph, build_graph
from .hazards import HazardIndex
from .loader import load_flood_zones, load_roads
from .models import FloodZone, GraphSummary, NearestVertexResponse, Point, Road, RouteOutcome, RouteStatus
from .pathfinder import find_nearest_vertex, shortest_path

logger = logging.getLogger(__name__)


class RoadNetwork:
    """Source layers plus the frozen route graph built from them.

    Construction does all the work; afterwards the object is only read, so a
    single instance can serve any number of concurrent queries.
    """

    def __init__(self, roads: Iterable[Road], flood_zones: Iterable[FloodZone]):
        self.roads: tuple[Road, ...] = tuple(roads)
        self.flood_zones: tuple[FloodZone, ...] = tuple(flood_zones)
        self.hazards = HazardIndex(self.flood_zones)
        self.graph: RouteGraph = build_graph(self.roads, self.hazards)

    @classmethod
    def from_files(cls, roads_path: str | Path, flood_zones_path: str | Path) -> RoadNetwork:
        return cls(load_roads(roads_path), load_flood_zones(flood_zones_path))

    def summary(self) -> GraphSummary:
        return GraphSummary(
            vertices=self.graph.vertex_count,
            edges=self.graph.edge_count,
            roads=len(self.roads),
            flood_zones=len(self.flood_zones),
        )

    def nearest(self, point: Point, tolerance_km: float = DEFAULT_SNAP_TOLERANCE_KM) -> NearestVertexResponse | None:
        vertex = find_nearest_vertex(self.graph, point, tolerance_km)
        if vertex is None:
            return None
        return NearestVertexResponse(query=point, vertex=vertex, distance_km=haversine_km(vertex, point))

    def route(self, start: Point, end: Point, tolerance_km: float = DEFAULT_SNAP_TOLERANCE_KM) -> RouteOutcome:
        """Snap both points onto the graph and find the shortest safe path."""
        outcome = RouteOutcome(status=RouteStatus.FOUND, start=start, end=end, tolerance_km=tolerance_km)

        outcome.snapped_start = find_nearest_vertex(self.graph, start, tolerance_km)
        if outcome.snapped_start is None:
            outcome.status = RouteStatus.START_NOT_FOUND
            logger.info("No vertex within %s km of start %s", tolerance_km, start)
            return outcome

        outcome.snapped_end = find_nearest_vertex(self.graph, end, tolerance_km)
        if outcome.snapped_end is None:
            outcome.status = RouteStatus.END_NOT_FOUND
            logger.info("No vertex within %s km of end %s", tolerance_km, end)
            return outcome

        outcome.route = shortest_path(self.graph, outcome.snapped_start, outcome.snapped_end)
        if outcome.route is None:
            outcome.status = RouteStatus.NO_PATH
            logger.info("No safe path between %s and %s", outcome.snapped_start, outcome.snapped_end)
            return outcome

        logger.debug(
            "Route %s -> %s: %d points, %.3f km",
            outcome.snapped_start,
            outcome.snapped_end,
            len(outcome.route.points),
            outcome.route.distance_km,
        )
        return outcome
