"""Route graph construction from road polylines and flood zones.

Vertices are stored in an arena: each distinct point gets a stable integer
id in insertion order, and adjacency is kept per id. The builder is the only
mutable stage; ``GraphBuilder.freeze`` hands out an immutable ``RouteGraph``
that queries share without locking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum

from .geometry import haversine_km
from .hazards import HazardLookup
from .models import Point, Road

logger = logging.getLogger(__name__)


class RouteGraph:
    """Immutable undirected weighted graph of safe road points."""

    __slots__ = ("_points", "_index", "_adjacency", "_edge_count")

    def __init__(
        self,
        points: tuple[Point, ...],
        index: dict[Point, int],
        adjacency: tuple[tuple[tuple[int, float], ...], ...],
        edge_count: int,
    ):
        self._points = points
        self._index = index
        self._adjacency = adjacency
        self._edge_count = edge_count

    @property
    def vertex_count(self) -> int:
        return len(self._points)

    @property
    def edge_count(self) -> int:
        return self._edge_count

    @property
    def vertices(self) -> tuple[Point, ...]:
        return self._points

    def __contains__(self, point: object) -> bool:
        return point in self._index

    def __len__(self) -> int:
        return len(self._points)

    def index_of(self, point: Point) -> int | None:
        return self._index.get(point)

    def point_at(self, idx: int) -> Point:
        return self._points[idx]

    def neighbors(self, idx: int) -> tuple[tuple[int, float], ...]:
        """(neighbor id, edge weight in km) pairs for vertex ``idx``."""
        return self._adjacency[idx]

    def edge_weight(self, p0: Point, p1: Point) -> float | None:
        i, j = self._index.get(p0), self._index.get(p1)
        if i is None or j is None:
            return None
        for neighbor, weight in self._adjacency[i]:
            if neighbor == j:
                return weight
        return None

    def has_edge(self, p0: Point, p1: Point) -> bool:
        return self.edge_weight(p0, p1) is not None

    def degree(self, point: Point) -> int:
        idx = self._index.get(point)
        return 0 if idx is None else len(self._adjacency[idx])

    def edges(self) -> Iterator[tuple[Point, Point, float]]:
        """Yield each undirected edge once as (p0, p1, weight_km)."""
        for i, adjacent in enumerate(self._adjacency):
            for j, weight in adjacent:
                if i < j:
                    yield self._points[i], self._points[j], weight


class GraphBuilder:
    """Mutable accumulator for a ``RouteGraph``."""

    def __init__(self):
        self._points: list[Point] = []
        self._index: dict[Point, int] = {}
        self._adjacency: list[dict[int, float]] = []
        self._edge_count = 0

    def add_vertex(self, point: Point) -> int:
        """Add ``point`` if it is new and return its id."""
        idx = self._index.get(point)
        if idx is None:
            idx = len(self._points)
            self._points.append(point)
            self._index[point] = idx
            self._adjacency.append({})
        return idx

    def add_edge(self, p0: Point, p1: Point) -> bool:
        """Connect two existing vertices. Returns False for self-loops and repeats."""
        i, j = self._index[p0], self._index[p1]
        if i == j or j in self._adjacency[i]:
            return False

        weight = haversine_km(p0, p1)
        self._adjacency[i][j] = weight
        self._adjacency[j][i] = weight
        self._edge_count += 1
        return True

    def freeze(self) -> RouteGraph:
        return RouteGraph(
            points=tuple(self._points),
            index=dict(self._index),
            adjacency=tuple(tuple(adj.items()) for adj in self._adjacency),
            edge_count=self._edge_count,
        )


class Step(Enum):
    """Outcome of visiting one road point during the graph walk.

    FLOODED clears the cursor; every other step moves it to the point.
    """

    FLOODED = "flooded"
    STARTED = "started"
    BLOCKED = "blocked"
    CONNECTED = "connected"


def classify_step(cursor: Point | None, point: Point, hazards: HazardLookup) -> Step:
    """Decide what visiting ``point`` does, given the previous accepted point."""
    if hazards.contains(point):
        return Step.FLOODED
    if cursor is None:
        return Step.STARTED
    if hazards.crosses(cursor, point):
        return Step.BLOCKED
    return Step.CONNECTED


def build_graph(roads: Iterable[Road], hazards: HazardLookup) -> RouteGraph:
    """Build the graph of flood-safe road points and segments."""
    builder = GraphBuilder()
    counts = {step: 0 for step in Step}
    num_roads = 0

    for road in roads:
        num_roads += 1
        cursor: Point | None = None

        for point in road.points:
            step = classify_step(cursor, point, hazards)
            counts[step] += 1

            if step is Step.FLOODED:
                cursor = None
                continue

            builder.add_vertex(point)
            if step is Step.CONNECTED:
                builder.add_edge(cursor, point)
            cursor = point

    graph = builder.freeze()
    logger.info(
        "Built route graph from %d roads: %d vertices, %d edges",
        num_roads,
        graph.vertex_count,
        graph.edge_count,
    )
    logger.debug(
        "Skipped %d flooded points and %d flood-crossing segments",
        counts[Step.FLOODED],
        counts[Step.BLOCKED],
    )
    return graph
