"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...models.domain import Waypoint
from ..geospatial import km_to_miles, round_distance


@dataclass(slots=True)
class TourSolution:
    tour: List[int]
    initial_tour: List[int]
    initial_distance_km: float
    distance_km: float
    swaps: int


@dataclass(slots=True)
class RouteStop:
    waypoint: Waypoint
    order: int


@dataclass(slots=True)
class RouteLeg:
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    distance_km: float

    @property
    def distance_km_rounded(self) -> float:
        return round_distance(self.distance_km)

    @property
    def distance_miles(self) -> float:
        return round_distance(km_to_miles(self.distance_km))


@dataclass(slots=True)
class RouteReport:
    stops: List[RouteStop]
    legs: List[RouteLeg]
    total_distance_km: float

    @property
    def total_distance_km_rounded(self) -> float:
        return round_distance(self.total_distance_km)

    @property
    def total_distance_miles(self) -> float:
        return round_distance(km_to_miles(self.total_distance_km))
