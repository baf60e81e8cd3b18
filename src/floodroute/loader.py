"""Road and flood-zone loading from GeoJSON and shapefiles.

Every layer is normalised to a GeoJSON FeatureCollection in WGS84 lon/lat
before its geometries are turned into ``Road`` and ``FloodZone`` values.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import shapefile
from pyproj import CRS, Transformer

from .models import FloodZone, Point, Road

logger = logging.getLogger(__name__)


def detect_crs(crs_source: str | Path | dict | None) -> tuple[int | None, str | None, bool | None]:
    """Parse a CRS from a WKT string, a .prj path, or a GeoJSON ``crs`` member.

    Returns (epsg_code, crs_name, is_projected) or (None, None, None) on failure.
    """
    if crs_source is None:
        return None, None, None

    if isinstance(crs_source, Path):
        if not crs_source.exists():
            return None, None, None
        user_input = crs_source.read_text()
    elif isinstance(crs_source, dict):
        # {"type": "name", "properties": {"name": "urn:ogc:def:crs:EPSG::3857"}}
        user_input = (crs_source.get("properties") or {}).get("name") or ""
    else:
        user_input = crs_source

    if not user_input.strip():
        return None, None, None

    try:
        crs = CRS.from_user_input(user_input)
    except Exception:
        logger.warning("Could not parse CRS %r, assuming WGS84", user_input[:80])
        return None, None, None

    return crs.to_epsg(), crs.name, crs.is_projected


def load_layer(source: str | Path) -> dict[str, Any]:
    """Load a GeoJSON FeatureCollection from a file path, GeoJSON text, or shapefile.

    Projected layers are reprojected to WGS84 lon/lat.
    """
    if isinstance(source, str) and source.lstrip().startswith("{"):
        return parse_geojson(source)

    path = Path(source)
    if path.suffix.lower() == ".shp" or (not path.suffix and path.with_suffix(".shp").exists()):
        return read_shapefile(path)

    if not path.exists():
        raise FileNotFoundError(f"Layer not found: {path}")
    return parse_geojson(path.read_text(encoding="utf-8"))


def parse_geojson(text: str) -> dict[str, Any]:
    """Parse GeoJSON text into a WGS84 FeatureCollection."""
    fc = json.loads(text)
    if not isinstance(fc, dict) or fc.get("type") != "FeatureCollection":
        raise ValueError("Expected a GeoJSON FeatureCollection")

    epsg, crs_name, is_projected = detect_crs(fc.get("crs"))
    if is_projected and epsg is not None:
        logger.info("Reprojecting layer from EPSG:%d (%s) to WGS84", epsg, crs_name)
        _reproject_collection(fc, epsg)
    fc.pop("crs", None)
    return fc


def read_shapefile(shp_path: str | Path) -> dict[str, Any]:
    """Read a POLYLINE or POLYGON shapefile as a WGS84 FeatureCollection.

    The companion .prj is picked up if present.
    """
    shp_path = Path(shp_path)
    main_file = shp_path if shp_path.suffix else shp_path.with_suffix(".shp")
    if not main_file.exists():
        raise FileNotFoundError(f"Shapefile not found: {main_file}")

    epsg, crs_name, is_projected = detect_crs(main_file.with_suffix(".prj"))

    with shapefile.Reader(str(main_file)) as sf:
        upper = sf.shapeTypeName.upper()
        if "POLYLINE" not in upper and "POLYGON" not in upper:
            raise ValueError(f"Unsupported shape type: {sf.shapeTypeName}. Expected POLYLINE or POLYGON shapes.")

        features = [
            {"type": "Feature", "geometry": shape.__geo_interface__, "properties": {}}
            for shape in sf.shapes()
            if shape.shapeType != shapefile.NULL
        ]

    fc = {"type": "FeatureCollection", "features": features}
    if is_projected and epsg is not None:
        logger.info("Reprojecting %s from EPSG:%d (%s) to WGS84", main_file.name, epsg, crs_name)
        _reproject_collection(fc, epsg)
    return fc


def roads_from_geojson(fc: dict[str, Any]) -> list[Road]:
    """Extract one Road per LineString (and per MultiLineString part)."""
    roads: list[Road] = []
    for geometry in _geometries(fc):
        kind = geometry.get("type")
        if kind == "LineString":
            roads.append(_to_road(geometry.get("coordinates")))
        elif kind == "MultiLineString":
            roads.extend(_to_road(line) for line in _sequence(geometry.get("coordinates"), "line coordinates"))
    return roads


def flood_zones_from_geojson(fc: dict[str, Any]) -> list[FloodZone]:
    """Extract one FloodZone per Polygon (and per MultiPolygon member)."""
    zones: list[FloodZone] = []
    for geometry in _geometries(fc):
        kind = geometry.get("type")
        if kind == "Polygon":
            zones.append(_to_zone(geometry.get("coordinates")))
        elif kind == "MultiPolygon":
            zones.extend(_to_zone(polygon) for polygon in _sequence(geometry.get("coordinates"), "polygon coordinates"))
    return zones


def load_roads(source: str | Path) -> list[Road]:
    roads = roads_from_geojson(load_layer(source))
    logger.info("Loaded %d roads from %s", len(roads), _describe(source))
    return roads


def load_flood_zones(source: str | Path) -> list[FloodZone]:
    zones = flood_zones_from_geojson(load_layer(source))
    logger.info("Loaded %d flood zones from %s", len(zones), _describe(source))
    return zones


def _geometries(fc: dict[str, Any]):
    for feature in _sequence(fc.get("features") or [], "features"):
        if not isinstance(feature, dict):
            raise ValueError(f"Invalid feature: {feature!r}")
        geometry = feature.get("geometry")
        if geometry and not isinstance(geometry, dict):
            raise ValueError(f"Invalid geometry: {geometry!r}")
        if geometry:
            yield geometry


def _sequence(value: Any, what: str) -> list | tuple:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Invalid {what}: {value!r}")
    return value


def _to_point(coord: list[float]) -> Point:
    if not isinstance(coord, (list, tuple)) or len(coord) < 2:
        raise ValueError(f"Invalid coordinate: {coord!r}")
    try:
        # Altitude, if any, is dropped
        return Point(lon=float(coord[0]), lat=float(coord[1]))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid coordinate: {coord!r}") from None


def _to_road(coords: list[list[float]]) -> Road:
    return Road(points=tuple(_to_point(c) for c in _sequence(coords, "line coordinates")))


def _to_zone(rings: list[list[list[float]]]) -> FloodZone:
    return FloodZone(
        rings=tuple(
            tuple(_to_point(c) for c in _sequence(ring, "polygon ring"))
            for ring in _sequence(rings, "polygon coordinates")
        )
    )


def _reproject_collection(fc: dict[str, Any], source_epsg: int) -> None:
    """Transform every geometry in ``fc`` to WGS84 lon/lat in-place."""
    transformer = Transformer.from_crs(f"EPSG:{source_epsg}", "EPSG:4326", always_xy=True)
    for geometry in _geometries(fc):
        geometry["coordinates"] = _transform_coords(geometry.get("coordinates"), transformer)


def _transform_coords(coords: Any, transformer: Transformer) -> Any:
    _sequence(coords, "coordinates")
    if coords and isinstance(coords[0], (int, float)):
        if len(coords) < 2:
            raise ValueError(f"Invalid coordinate: {coords!r}")
        lon, lat = transformer.transform(coords[0], coords[1])
        return [lon, lat, *coords[2:]]
    return [_transform_coords(c, transformer) for c in coords]


def _describe(source: str | Path) -> str:
    if isinstance(source, str) and source.lstrip().startswith("{"):
        return "inline GeoJSON"
    return str(source)
