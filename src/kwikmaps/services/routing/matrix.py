"""Pairwise distance matrix construction."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Waypoint
from ..geospatial import haversine_km


def build_distance_matrix(waypoints: Sequence[Waypoint]) -> list[list[float]]:
    """Return the N x N great-circle distance matrix (km) for the waypoints.

    Each unordered pair is computed once and mirrored, so the matrix is exactly
    symmetric. The diagonal is zero.
    """
    count = len(waypoints)
    matrix = [[0.0] * count for _ in range(count)]
    for i in range(count):
        origin = waypoints[i]
        for j in range(i + 1, count):
            target = waypoints[j]
            distance = haversine_km(origin.latitude, origin.longitude, target.latitude, target.longitude)
            matrix[i][j] = distance
            matrix[j][i] = distance
    return matrix
