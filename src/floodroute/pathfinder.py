"""Nearest-vertex snapping and shortest safe paths over a ``RouteGraph``."""

import heapq
import math

from .geometry import haversine_km
from .graph import RouteGraph
from .models import Point, Route


def find_nearest_vertex(graph: RouteGraph, target: Point, max_distance_km: float) -> Point | None:
    """Return a graph vertex closest to ``target`` within ``max_distance_km``.

    Equally distant vertices resolve to the one added to the graph first.
    """
    nearest = None
    nearest_distance = math.inf

    for vertex in graph.vertices:
        distance = haversine_km(vertex, target)
        if distance < nearest_distance and distance <= max_distance_km:
            nearest_distance = distance
            nearest = vertex

    return nearest


def shortest_path(graph: RouteGraph, source: Point, destination: Point) -> Route | None:
    """Dijkstra shortest path between two graph vertices.

    Returns None when either point is not a vertex or when the two are not
    connected.
    """
    src = graph.index_of(source)
    dst = graph.index_of(destination)
    if src is None or dst is None:
        return None
    if src == dst:
        return Route(points=[source], distance_km=0.0)

    dist = [math.inf] * graph.vertex_count
    prev: list[int | None] = [None] * graph.vertex_count
    settled = [False] * graph.vertex_count
    dist[src] = 0.0
    frontier = [(0.0, src)]

    while frontier:
        d, u = heapq.heappop(frontier)
        if settled[u]:
            continue
        settled[u] = True
        if u == dst:
            break

        for v, weight in graph.neighbors(u):
            candidate = d + weight
            if candidate < dist[v]:
                dist[v] = candidate
                prev[v] = u
                heapq.heappush(frontier, (candidate, v))

    if not settled[dst]:
        return None

    path = []
    node: int | None = dst
    while node is not None:
        path.append(graph.point_at(node))
        node = prev[node]
    path.reverse()

    return Route(points=path, distance_km=dist[dst])
