"""Command-line entry point: one-shot routing runs and the HTTP server."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import Settings, configure_logging, load_settings
from .models import Point, RouteOutcome
from .routing import RoadNetwork
from .visualization import build_final_visualization, geojson_io_url, open_in_browser, route_feature_collection

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_ROUTE = 1
EXIT_USAGE = 2


def parse_point(text: str) -> Point:
    """Parse ``"lon,lat"`` into a Point, rejecting out-of-range values."""
    try:
        lon_text, lat_text = text.split(",")
        lon, lat = float(lon_text), float(lat_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected LON,LAT but got {text!r}") from None

    if not -180 <= lon <= 180 or not -90 <= lat <= 90:
        raise argparse.ArgumentTypeError(f"coordinates out of range: {text!r}")
    return Point(lon=lon, lat=lat)


def positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {text!r}")
    return value


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="floodroute", description="Flood-safe evacuation routing")
    parser.add_argument("--log-level", default=settings.log_level, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    route = sub.add_parser("route", help="Compute one route and print it")
    route.add_argument("--roads", type=Path, default=settings.roads_path, help="Road layer (.geojson or .shp)")
    route.add_argument(
        "--flood-zones", type=Path, default=settings.flood_zones_path, help="Flood-zone layer (.geojson or .shp)"
    )
    route.add_argument("--start", type=parse_point, required=True, metavar="LON,LAT")
    route.add_argument("--end", type=parse_point, required=True, metavar="LON,LAT")
    route.add_argument("--tolerance-km", type=positive_float, default=settings.snap_tolerance_km)
    route.add_argument("--geojson", type=Path, help="Write the route as GeoJSON to this file")
    route.add_argument("--full", action="store_true", help="Include roads and flood zones in the GeoJSON output")
    route.add_argument("--plot", type=Path, help="Save a PNG map of the route to this file")
    route.add_argument("--open", action="store_true", help="Open the route on geojson.io")

    serve = sub.add_parser("serve", help="Run the HTTP routing service")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    return parser


def run_route(args: argparse.Namespace) -> int:
    if args.roads is None or args.flood_zones is None:
        print("Both --roads and --flood-zones are required (or FLOODROUTE_ROADS / FLOODROUTE_FLOOD_ZONES)")
        return EXIT_USAGE

    try:
        network = RoadNetwork.from_files(args.roads, args.flood_zones)
    except (OSError, ValueError) as e:
        print(f"Could not load input data: {e}")
        return EXIT_USAGE

    outcome = network.route(args.start, args.end, args.tolerance_km)
    if not outcome.found:
        print(outcome.message())
        return EXIT_NO_ROUTE

    _report(outcome)
    points = outcome.route.points

    if args.geojson:
        if args.full:
            fc = build_final_visualization(network.roads, network.flood_zones, points)
        else:
            fc = route_feature_collection(points)
        args.geojson.write_text(json.dumps(fc, indent=2))
        print(f"GeoJSON written: {args.geojson}")

    if args.plot:
        from .plotting import plot_network

        plot_network(network.roads, network.flood_zones, points, args.plot)
        print(f"Plot saved: {args.plot}")

    if args.open:
        full = build_final_visualization(network.roads, network.flood_zones, points)
        open_in_browser(geojson_io_url(full))

    return EXIT_OK


def _report(outcome: RouteOutcome) -> None:
    route = outcome.route
    print(f"Shortest path distance: {route.distance_km:.4f} km")
    print(f"Snapped start: ({outcome.snapped_start.lon}, {outcome.snapped_start.lat})")
    print(f"Snapped end:   ({outcome.snapped_end.lon}, {outcome.snapped_end.lat})")
    print(f"Points ({len(route.points)}):")
    for p in route.points:
        print(f"  {p.lon}, {p.lat}")


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("floodroute.server:app", host=args.host, port=args.port)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "route":
        return run_route(args)
    return run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
