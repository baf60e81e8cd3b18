"""Tests for GeoJSON and shapefile layer loading."""

import json

import pytest
import shapefile
from pyproj import CRS

from floodroute import (
    FloodZone,
    Point,
    Road,
    flood_zones_from_geojson,
    load_flood_zones,
    load_layer,
    load_roads,
    roads_from_geojson,
)
from floodroute.loader import detect_crs


def P(lon, lat):
    return Point(lon=lon, lat=lat)


def feature(geometry):
    return {"type": "Feature", "properties": {}, "geometry": geometry}


def collection(*geometries, **extra):
    return {"type": "FeatureCollection", "features": [feature(g) for g in geometries], **extra}


FLOOD_RING = [[-0.1, 0.9], [-0.1, 1.1], [0.1, 1.1], [0.1, 0.9], [-0.1, 0.9]]


class TestGeoJsonConversion:
    def test_linestrings_become_roads(self, roads_geojson):
        roads = roads_from_geojson(roads_geojson)
        assert len(roads) == 2
        assert roads[0] == Road(points=(P(0, 0), P(0, 1), P(0, 2)))

    def test_multilinestring_parts(self):
        fc = collection({"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]], [[2, 2], [3, 3], [4, 4]]]})
        roads = roads_from_geojson(fc)
        assert [len(r.points) for r in roads] == [2, 3]

    def test_other_geometries_are_ignored(self):
        fc = collection(
            {"type": "Point", "coordinates": [0, 0]},
            {"type": "Polygon", "coordinates": [FLOOD_RING]},
            {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
        )
        fc["features"].append({"type": "Feature", "properties": {}, "geometry": None})
        assert len(roads_from_geojson(fc)) == 1
        assert len(flood_zones_from_geojson(fc)) == 1

    def test_altitude_is_dropped(self):
        roads = roads_from_geojson(collection({"type": "LineString", "coordinates": [[1, 2, 30], [3, 4, 40]]}))
        assert roads[0].points == (P(1, 2), P(3, 4))

    def test_polygon_keeps_all_rings(self):
        hole = [[-0.05, 0.95], [0.05, 0.95], [0.05, 1.05], [-0.05, 1.05], [-0.05, 0.95]]
        zones = flood_zones_from_geojson(collection({"type": "Polygon", "coordinates": [FLOOD_RING, hole]}))
        assert len(zones) == 1
        assert len(zones[0].rings) == 2
        assert zones[0].outer_ring[1] == P(-0.1, 1.1)

    def test_multipolygon_members(self):
        other = [[5, 5], [5, 6], [6, 6], [6, 5], [5, 5]]
        zones = flood_zones_from_geojson(collection({"type": "MultiPolygon", "coordinates": [[FLOOD_RING], [other]]}))
        assert len(zones) == 2
        assert all(isinstance(z, FloodZone) for z in zones)

    @pytest.mark.parametrize(
        "coordinates",
        [[[1], [2, 3]], [0, 0], None, [[0, 0], 5], [[0, 0], [None, 1]], "0,0 1,1"],
    )
    def test_invalid_line_coordinates(self, coordinates):
        with pytest.raises(ValueError, match="Invalid"):
            roads_from_geojson(collection({"type": "LineString", "coordinates": coordinates}))

    @pytest.mark.parametrize(
        "geometry",
        [
            {"type": "Polygon", "coordinates": None},
            {"type": "Polygon", "coordinates": [5]},
            {"type": "Polygon", "coordinates": [[[0, 0], 7]]},
            {"type": "MultiPolygon", "coordinates": None},
            {"type": "MultiPolygon", "coordinates": [None]},
        ],
    )
    def test_invalid_polygon_coordinates(self, geometry):
        with pytest.raises(ValueError, match="Invalid"):
            flood_zones_from_geojson(collection(geometry))

    def test_invalid_multilinestring(self):
        with pytest.raises(ValueError, match="Invalid"):
            roads_from_geojson(collection({"type": "MultiLineString", "coordinates": None}))

    def test_missing_coordinates_member(self):
        with pytest.raises(ValueError, match="Invalid"):
            roads_from_geojson(collection({"type": "LineString"}))

    @pytest.mark.parametrize("features", [[1], [{"geometry": "LineString"}], 5])
    def test_malformed_features(self, features):
        with pytest.raises(ValueError, match="Invalid"):
            roads_from_geojson({"type": "FeatureCollection", "features": features})

    def test_malformed_projected_layer(self):
        fc = collection(
            {"type": "LineString", "coordinates": None},
            crs={"type": "name", "properties": {"name": "EPSG:3857"}},
        )
        with pytest.raises(ValueError, match="Invalid"):
            load_roads(json.dumps(fc))


class TestLoadLayer:
    def test_from_file(self, layer_files):
        roads_path, zones_path = layer_files
        assert len(load_roads(roads_path)) == 2
        assert len(load_flood_zones(str(zones_path))) == 1

    def test_from_text(self, flood_geojson):
        zones = load_flood_zones(json.dumps(flood_geojson))
        assert zones[0].outer_ring[0] == P(-0.1, 0.9)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_layer(tmp_path / "nope.geojson")

    def test_not_a_feature_collection(self, tmp_path):
        path = tmp_path / "feature.geojson"
        path.write_text(json.dumps(feature({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})))
        with pytest.raises(ValueError, match="FeatureCollection"):
            load_layer(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.geojson"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_layer(path)

    def test_projected_layer_is_reprojected(self):
        fc = collection(
            {"type": "LineString", "coordinates": [[0, 0], [111319.49079327357, 0]]},
            crs={"type": "name", "properties": {"name": "urn:ogc:def:crs:EPSG::3857"}},
        )
        roads = load_roads(json.dumps(fc))
        start, end = roads[0].points
        assert start.lon == pytest.approx(0, abs=1e-9)
        assert end.lon == pytest.approx(1.0, abs=1e-6)
        assert end.lat == pytest.approx(0, abs=1e-9)

    def test_geographic_crs_left_alone(self):
        fc = collection(
            {"type": "LineString", "coordinates": [[21.76, 49.68], [21.77, 49.69]]},
            crs={"type": "name", "properties": {"name": "urn:ogc:def:crs:OGC:1.3:CRS84"}},
        )
        assert load_roads(json.dumps(fc))[0].points[0] == P(21.76, 49.68)


class TestDetectCrs:
    def test_none(self):
        assert detect_crs(None) == (None, None, None)

    def test_wkt(self):
        epsg, name, projected = detect_crs(CRS.from_epsg(4326).to_wkt())
        assert epsg == 4326
        assert name == "WGS 84"
        assert projected is False

    def test_geojson_member(self):
        epsg, _, projected = detect_crs({"type": "name", "properties": {"name": "EPSG:3857"}})
        assert epsg == 3857
        assert projected is True

    def test_missing_prj(self, tmp_path):
        assert detect_crs(tmp_path / "roads.prj") == (None, None, None)

    def test_garbage(self):
        assert detect_crs("definitely not a crs") == (None, None, None)


class TestShapefiles:
    def test_polyline_roads(self, tmp_path):
        base = tmp_path / "roads"
        with shapefile.Writer(str(base), shapeType=shapefile.POLYLINE) as w:
            w.field("name", "C")
            w.line([[[0, 0], [0, 1], [0, 2]]])
            w.record("main")
            w.line([[[0, 0], [0.5, 1]], [[0.5, 1], [0, 2]]])
            w.record("bypass")

        roads = load_roads(base.with_suffix(".shp"))
        assert len(roads) == 3
        assert roads[0].points == (P(0, 0), P(0, 1), P(0, 2))

    def test_polygon_flood_zones(self, tmp_path):
        base = tmp_path / "flood_zones"
        with shapefile.Writer(str(base), shapeType=shapefile.POLYGON) as w:
            w.field("name", "C")
            w.poly([FLOOD_RING])
            w.record("river")

        zones = load_flood_zones(base)
        assert len(zones) == 1
        assert P(-0.1, 0.9) in zones[0].outer_ring

    def test_projected_shapefile(self, tmp_path):
        base = tmp_path / "roads_3857"
        with shapefile.Writer(str(base), shapeType=shapefile.POLYLINE) as w:
            w.field("name", "C")
            w.line([[[0, 0], [111319.49079327357, 0]]])
            w.record("east")
        base.with_suffix(".prj").write_text(CRS.from_epsg(3857).to_wkt())

        end = load_roads(base.with_suffix(".shp"))[0].points[-1]
        assert end.lon == pytest.approx(1.0, abs=1e-6)

    def test_point_shapefile_rejected(self, tmp_path):
        base = tmp_path / "points"
        with shapefile.Writer(str(base), shapeType=shapefile.POINT) as w:
            w.field("name", "C")
            w.point(1, 2)
            w.record("p")

        with pytest.raises(ValueError, match="Unsupported shape type"):
            load_layer(base.with_suffix(".shp"))

    def test_missing_shapefile(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_layer(tmp_path / "nothing.shp")
