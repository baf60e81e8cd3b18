"""Static map rendering of roads, flood zones and an evacuation route."""

from collections.abc import Sequence
from pathlib import Path

import matplotlib.pyplot as plt

from .models import FloodZone, Point, Road


def plot_network(
    roads: Sequence[Road],
    flood_zones: Sequence[FloodZone],
    points: Sequence[Point],
    path: Path,
    title: str = "Flood-safe evacuation route",
) -> None:
    """Save a lon/lat map of the network and route to ``path``."""
    fig, ax = plt.subplots(figsize=(10, 10))

    for zone in flood_zones:
        ring = zone.outer_ring
        if ring:
            ax.fill([p.lon for p in ring], [p.lat for p in ring], color="#e55e5e", alpha=0.5, linewidth=1)

    for road in roads:
        ax.plot([p.lon for p in road.points], [p.lat for p in road.points], color="#3887be", linewidth=0.8)

    if len(points) > 1:
        ax.plot([p.lon for p in points], [p.lat for p in points], color="#00cc00", linewidth=3, label="Route")
    if points:
        ax.scatter([points[0].lon], [points[0].lat], color="#00ff00", zorder=5, label="Start")
        ax.scatter([points[-1].lon], [points[-1].lat], color="#ff0000", zorder=5, label="End")
        ax.legend()

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title(title)
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
