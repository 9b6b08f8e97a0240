"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io

from ..routing.models import RouteReport


def route_report_to_json(report: RouteReport) -> dict:
    return {
        "optimized_route": [
            {
                "id": stop.waypoint.waypoint_id,
                "name": stop.waypoint.name,
                "latitude": stop.waypoint.latitude,
                "longitude": stop.waypoint.longitude,
                "order": stop.order,
            }
            for stop in report.stops
        ],
        "total_distance_km": report.total_distance_km_rounded,
        "total_distance_miles": report.total_distance_miles,
        "legs": [
            {
                "from_id": leg.from_id,
                "from_name": leg.from_name,
                "to_id": leg.to_id,
                "to_name": leg.to_name,
                "distance_km": leg.distance_km_rounded,
                "distance_miles": leg.distance_miles,
            }
            for leg in report.legs
        ],
    }


def route_report_to_csv(report: RouteReport) -> str:
    """One row per stop; leg columns describe the leg arriving at that stop."""
    buffer = io.StringIO()
    fieldnames = [
        "order",
        "id",
        "name",
        "latitude",
        "longitude",
        "distance_from_prev_km",
        "distance_from_prev_miles",
        "total_distance_km",
        "total_distance_miles",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for position, stop in enumerate(report.stops):
        leg = report.legs[position - 1] if position > 0 else None
        writer.writerow(
            {
                "order": stop.order,
                "id": stop.waypoint.waypoint_id,
                "name": stop.waypoint.name,
                "latitude": stop.waypoint.latitude,
                "longitude": stop.waypoint.longitude,
                "distance_from_prev_km": leg.distance_km_rounded if leg else 0.0,
                "distance_from_prev_miles": leg.distance_miles if leg else 0.0,
                "total_distance_km": report.total_distance_km_rounded,
                "total_distance_miles": report.total_distance_miles,
            }
        )
    return buffer.getvalue()
