"""Map an index tour back onto waypoints and compute leg statistics."""

from __future__ import annotations

from typing import Callable, Sequence

from ...models.domain import Waypoint
from ..geospatial import haversine_km
from .models import RouteLeg, RouteReport, RouteStop


def _assemble_report(
    waypoints: Sequence[Waypoint],
    tour: Sequence[int],
    leg_distance: Callable[[int, int], float],
) -> RouteReport:
    stops = [RouteStop(waypoint=waypoints[index], order=position) for position, index in enumerate(tour, start=1)]

    legs: list[RouteLeg] = []
    total_distance = 0.0
    for from_index, to_index in zip(tour, tour[1:]):
        origin = waypoints[from_index]
        target = waypoints[to_index]
        distance = leg_distance(from_index, to_index)
        total_distance += distance
        legs.append(
            RouteLeg(
                from_id=origin.waypoint_id,
                from_name=origin.name,
                to_id=target.waypoint_id,
                to_name=target.name,
                distance_km=distance,
            )
        )

    return RouteReport(stops=stops, legs=legs, total_distance_km=total_distance)


def build_route_report(
    waypoints: Sequence[Waypoint],
    tour: Sequence[int],
    distance_matrix: Sequence[Sequence[float]],
) -> RouteReport:
    return _assemble_report(waypoints, tour, lambda i, j: distance_matrix[i][j])


def evaluate_route(waypoints: Sequence[Waypoint]) -> RouteReport:
    """Report an already ordered route without reordering it.

    Only consecutive legs are measured; no distance matrix is built.
    """

    def leg_distance(i: int, j: int) -> float:
        origin, target = waypoints[i], waypoints[j]
        return haversine_km(origin.latitude, origin.longitude, target.latitude, target.longitude)

    return _assemble_report(waypoints, list(range(len(waypoints))), leg_distance)
