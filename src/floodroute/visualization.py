"""GeoJSON payloads for displaying routes, plus geojson.io links."""

from __future__ import annotations

import json
import logging
import webbrowser
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

from .models import FloodZone, Point, Road

logger = logging.getLogger(__name__)

GEOJSON_IO_URL = "http://geojson.io/#data=data:application/json,"

ROAD_STYLE = {"type": "road", "stroke": "#3887be", "stroke-width": 2}
FLOOD_ZONE_STYLE = {
    "type": "flood_zone",
    "fill": "#e55e5e",
    "fill-opacity": 0.5,
    "stroke": "#e55e5e",
    "stroke-width": 1,
}
ROUTE_STYLE = {"type": "escape_path", "stroke": "#00ff00", "stroke-width": 4}
START_STYLE = {"type": "start_point", "marker-color": "#00ff00"}
END_STYLE = {"type": "end_point", "marker-color": "#ff0000"}


def route_feature_collection(points: Sequence[Point]) -> dict[str, Any]:
    """Wrap a route as a FeatureCollection holding one LineString."""
    return _collection([_feature(_line(points))])


def build_final_visualization(
    roads: Sequence[Road],
    flood_zones: Sequence[FloodZone],
    points: Sequence[Point],
) -> dict[str, Any]:
    """Roads, flood zones, the route and its end markers in one styled collection."""
    features = [_feature(_line(road.points), ROAD_STYLE) for road in roads]
    features += [_feature(_polygon(zone), FLOOD_ZONE_STYLE) for zone in flood_zones]

    if len(points) > 1:
        features.append(_feature(_line(points), ROUTE_STYLE))

    if points:
        features.append(_feature(_point(points[0]), START_STYLE))
        features.append(_feature(_point(points[-1]), END_STYLE))

    return _collection(features)


def geojson_io_url(fc: dict[str, Any]) -> str:
    """Build a geojson.io link with ``fc`` embedded in the URL fragment."""
    payload = json.dumps(fc, separators=(",", ":"))
    return GEOJSON_IO_URL + quote(payload, safe="")


def open_in_browser(url: str) -> bool:
    opened = webbrowser.open(url)
    if not opened:
        logger.warning("No browser available to open the visualization")
    return opened


def _collection(features: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": features}


def _feature(geometry: dict[str, Any], properties: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"type": "Feature", "geometry": geometry, "properties": dict(properties or {})}


def _point(point: Point) -> dict[str, Any]:
    return {"type": "Point", "coordinates": point.coordinates()}


def _line(points: Sequence[Point]) -> dict[str, Any]:
    return {"type": "LineString", "coordinates": [p.coordinates() for p in points]}


def _polygon(zone: FloodZone) -> dict[str, Any]:
    return {"type": "Polygon", "coordinates": [[p.coordinates() for p in ring] for ring in zone.rings]}
