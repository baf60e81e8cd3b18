"""FastAPI service answering flood-safe routing queries."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException, Query, Request

from .config import DEFAULT_SNAP_TOLERANCE_KM, Settings, configure_logging, load_settings
from .models import GraphSummary, NearestVertexResponse, Point, RouteResponse, VisualizationLink
from .routing import RoadNetwork
from .visualization import build_final_visualization, geojson_io_url, route_feature_collection

logger = logging.getLogger(__name__)

router = APIRouter()


def create_app(network: RoadNetwork | None = None, settings: Settings | None = None) -> FastAPI:
    """Create the service.

    Pass a prebuilt ``network`` to skip loading; otherwise it is built from the
    configured files when the application starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.settings is None:
            app.state.settings = load_settings()
            configure_logging(app.state.settings.log_level)
        if app.state.network is None:
            app.state.network = _load_network(app.state.settings)
        yield

    app = FastAPI(title="Flood-safe Routing", version="0.1.0", lifespan=lifespan)
    app.state.network = network
    app.state.settings = settings
    app.include_router(router)
    return app


def _load_network(settings: Settings) -> RoadNetwork:
    if settings.roads_path is None or settings.flood_zones_path is None:
        raise RuntimeError("FLOODROUTE_ROADS and FLOODROUTE_FLOOD_ZONES must both be set")
    logger.info("Building road network from %s and %s", settings.roads_path, settings.flood_zones_path)
    return RoadNetwork.from_files(settings.roads_path, settings.flood_zones_path)


def _network(request: Request) -> RoadNetwork:
    network = request.app.state.network
    if network is None:
        raise HTTPException(status_code=503, detail="Road network not loaded")
    return network


def _tolerance(request: Request, tolerance_km: float | None) -> float:
    if tolerance_km is not None:
        return tolerance_km
    settings = request.app.state.settings
    return settings.snap_tolerance_km if settings is not None else DEFAULT_SNAP_TOLERANCE_KM


@router.get("/health", response_model=GraphSummary)
async def health(request: Request):
    return _network(request).summary()


@router.get("/nearest", response_model=NearestVertexResponse)
async def nearest(
    request: Request,
    lon: float = Query(..., ge=-180, le=180),
    lat: float = Query(..., ge=-90, le=90),
    tolerance_km: float | None = Query(None, gt=0),
):
    """Snap a point to the closest safe road vertex."""
    tolerance = _tolerance(request, tolerance_km)
    result = _network(request).nearest(Point(lon=lon, lat=lat), tolerance)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No road point within {tolerance} km")
    return result


@router.get("/route")
async def route(
    request: Request,
    start_lon: float = Query(..., ge=-180, le=180),
    start_lat: float = Query(..., ge=-90, le=90),
    end_lon: float = Query(..., ge=-180, le=180),
    end_lat: float = Query(..., ge=-90, le=90),
    tolerance_km: float | None = Query(None, gt=0),
    format: str = Query("json", pattern="^(json|geojson|full|url)$"),
):
    """Shortest flood-safe route between two points.

    Formats:
    - ``json``: route summary with snapped endpoints
    - ``geojson``: the route as a LineString FeatureCollection
    - ``full``: roads, flood zones and route in one styled FeatureCollection
    - ``url``: a geojson.io link for the ``full`` collection
    """
    network = _network(request)
    outcome = network.route(
        Point(lon=start_lon, lat=start_lat),
        Point(lon=end_lon, lat=end_lat),
        _tolerance(request, tolerance_km),
    )
    if not outcome.found:
        raise HTTPException(status_code=404, detail=outcome.message())

    points = outcome.route.points
    if format == "geojson":
        return route_feature_collection(points)
    if format == "full":
        return build_final_visualization(network.roads, network.flood_zones, points)
    if format == "url":
        fc = build_final_visualization(network.roads, network.flood_zones, points)
        return VisualizationLink(url=geojson_io_url(fc))

    return RouteResponse(
        start=outcome.start,
        end=outcome.end,
        snapped_start=outcome.snapped_start,
        snapped_end=outcome.snapped_end,
        distance_km=outcome.route.distance_km,
        num_points=len(points),
        points=points,
    )


app = create_app()
