"""Flood-safe evacuation routing over a road network."""

from .geometry import haversine_km, point_in_polygon, segment_intersects_polygon, segments_intersect
from .graph import GraphBuilder, RouteGraph, Step, build_graph, classify_step
from .hazards import HazardIndex, HazardLookup
from .loader import flood_zones_from_geojson, load_flood_zones, load_layer, load_roads, roads_from_geojson
from .models import FloodZone, Point, Road, Route, RouteOutcome, RouteStatus
from .pathfinder import find_nearest_vertex, shortest_path
from .routing import RoadNetwork

__all__ = [
    "FloodZone",
    "GraphBuilder",
    "HazardIndex",
    "HazardLookup",
    "Point",
    "RoadNetwork",
    "Road",
    "Route",
    "RouteGraph",
    "RouteOutcome",
    "RouteStatus",
    "Step",
    "build_graph",
    "classify_step",
    "find_nearest_vertex",
    "flood_zones_from_geojson",
    "haversine_km",
    "load_flood_zones",
    "load_layer",
    "load_roads",
    "point_in_polygon",
    "roads_from_geojson",
    "segment_intersects_polygon",
    "segments_intersect",
    "shortest_path",
]
