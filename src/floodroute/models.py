"""Pydantic data models for flood-safe routing."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A WGS84 (longitude, latitude) pair in decimal degrees.

    Points are frozen and compare by exact coordinate value, so the same
    road coordinate referenced by several roads maps to one graph vertex.
    """

    model_config = ConfigDict(frozen=True)

    lon: float
    lat: float

    def coordinates(self) -> list[float]:
        return [self.lon, self.lat]


class Road(BaseModel):
    """A single drivable/walkable polyline."""

    model_config = ConfigDict(frozen=True)

    points: tuple[Point, ...]


class FloodZone(BaseModel):
    """A flood-affected polygon.

    Only the outer ring takes part in containment and crossing tests;
    any further rings (holes) are kept for display only.
    """

    model_config = ConfigDict(frozen=True)

    rings: tuple[tuple[Point, ...], ...] = ()

    @property
    def outer_ring(self) -> tuple[Point, ...]:
        return self.rings[0] if self.rings else ()


class Route(BaseModel):
    """An ordered vertex sequence and its total length."""

    points: list[Point]
    distance_km: float


class RouteStatus(str, Enum):
    FOUND = "found"
    START_NOT_FOUND = "start_not_found"
    END_NOT_FOUND = "end_not_found"
    NO_PATH = "no_path"


class RouteOutcome(BaseModel):
    """Result of a routing query between two arbitrary points."""

    status: RouteStatus
    start: Point
    end: Point
    tolerance_km: float
    snapped_start: Point | None = None
    snapped_end: Point | None = None
    route: Route | None = None

    @property
    def found(self) -> bool:
        return self.status is RouteStatus.FOUND

    def message(self) -> str:
        if self.status is RouteStatus.START_NOT_FOUND:
            return f"No road point within {self.tolerance_km} km of the start"
        if self.status is RouteStatus.END_NOT_FOUND:
            return f"No road point within {self.tolerance_km} km of the end"
        if self.status is RouteStatus.NO_PATH:
            return "No flood-safe path between the start and end points"
        return f"Route found with {len(self.route.points)} points"


class GraphSummary(BaseModel):
    """Size of the built route graph."""

    status: str = "ok"
    vertices: int
    edges: int
    roads: int
    flood_zones: int


class NearestVertexResponse(BaseModel):
    query: Point
    vertex: Point
    distance_km: float


class RouteResponse(BaseModel):
    start: Point
    end: Point
    snapped_start: Point
    snapped_end: Point
    distance_km: float
    num_points: int = Field(..., description="Number of vertices on the route")
    points: list[Point]


class VisualizationLink(BaseModel):
    url: str
