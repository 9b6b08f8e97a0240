"""Domain models for route waypoints."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Waypoint:
    """Represents a named geographic point to be visited."""

    waypoint_id: str
    name: str
    latitude: float
    longitude: float
