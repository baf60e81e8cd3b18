import json

import pytest

from floodroute import FloodZone, HazardIndex, Point, Road


def square(cx: float, cy: float, half: float) -> FloodZone:
    """Closed square ring centred on (cx, cy), walked clockwise."""
    ring = (
        Point(lon=cx - half, lat=cy - half),
        Point(lon=cx - half, lat=cy + half),
        Point(lon=cx + half, lat=cy + half),
        Point(lon=cx + half, lat=cy - half),
        Point(lon=cx - half, lat=cy - half),
    )
    return FloodZone(rings=(ring,))


def road(*coords: tuple[float, float]) -> Road:
    return Road(points=tuple(Point(lon=lon, lat=lat) for lon, lat in coords))


@pytest.fixture
def straight_road():
    return road((0, 0), (0, 1), (0, 2))


@pytest.fixture
def midpoint_zone():
    """A zone covering (0, 1) and nothing else on the straight road."""
    return square(0, 1, 0.1)


@pytest.fixture
def no_hazards():
    return HazardIndex([])


@pytest.fixture
def roads_geojson():
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"name": "main"},
                "geometry": {"type": "LineString", "coordinates": [[0, 0], [0, 1], [0, 2]]},
            },
            {
                "type": "Feature",
                "properties": {"name": "bypass"},
                "geometry": {"type": "LineString", "coordinates": [[0, 0], [0.5, 1], [0, 2]]},
            },
        ],
    }


@pytest.fixture
def flood_geojson():
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[-0.1, 0.9], [-0.1, 1.1], [0.1, 1.1], [0.1, 0.9], [-0.1, 0.9]]],
                },
            }
        ],
    }


@pytest.fixture
def layer_files(tmp_path, roads_geojson, flood_geojson):
    roads_path = tmp_path / "roads.geojson"
    zones_path = tmp_path / "flood_zones.geojson"
    roads_path.write_text(json.dumps(roads_geojson))
    zones_path.write_text(json.dumps(flood_geojson))
    return roads_path, zones_path
