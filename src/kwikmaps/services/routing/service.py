"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...models.domain import Waypoint
from ...schemas.routing import (
    RouteChatRequest,
    RouteChatResponse,
    RouteEvaluationRequest,
    RouteOptimizationRequest,
    RouteOptimizationResponse,
    RouteSummaryModel,
    WaypointModel,
)
from ..insights.advisor import chat_about_route
from ..insights.narrative import generate_travel_insights
from ..outputs.routing_formatter import route_report_to_json
from .matrix import build_distance_matrix
from .models import RouteReport
from .reporter import build_route_report, evaluate_route
from .solver import solve_tour

MIN_WAYPOINTS = 2

logger = logging.getLogger(__name__)


def _to_waypoints(models: Sequence[WaypointModel]) -> list[Waypoint]:
    return [
        Waypoint(
            waypoint_id=model.id if model.id is not None else str(position),
            name=model.name,
            latitude=model.latitude,
            longitude=model.longitude,
        )
        for position, model in enumerate(models, start=1)
    ]


def _validate_waypoint_ceiling(waypoints: Sequence[Waypoint]) -> None:
    if len(waypoints) > settings.max_waypoints:
        raise ValueError(
            f"Too many waypoints: {len(waypoints)} (maximum is {settings.max_waypoints})."
        )


def _validate_waypoint_count(waypoints: Sequence[Waypoint]) -> None:
    if len(waypoints) < MIN_WAYPOINTS:
        raise ValueError(f"At least {MIN_WAYPOINTS} waypoints are required to optimize a route.")
    _validate_waypoint_ceiling(waypoints)


def compute_route(waypoints: Sequence[Waypoint]) -> tuple[RouteReport, dict]:
    """Run the optimizer and return the report plus solver metadata."""
    _validate_waypoint_count(waypoints)

    distance_matrix = build_distance_matrix(waypoints)
    solution = solve_tour(distance_matrix, wrap_boundary=settings.two_opt_wrap_boundary)
    report = build_route_report(waypoints, solution.tour, distance_matrix)

    metadata = {
        "waypoint_count": len(waypoints),
        "initial_distance_km": round(solution.initial_distance_km, 1),
        "swaps": solution.swaps,
        "boundary_mode": "wrap" if settings.two_opt_wrap_boundary else "open",
    }
    return report, metadata


def optimize_route(payload: RouteOptimizationRequest) -> tuple[RouteReport, RouteOptimizationResponse]:
    waypoints = _to_waypoints(payload.waypoints)
    report, metadata = compute_route(waypoints)
    logger.info(
        f"Optimized route over {len(waypoints)} waypoints: "
        f"{report.total_distance_km:.1f} km ({metadata['swaps']} 2-opt swaps)"
    )

    ai_insights = generate_travel_insights(report) if payload.include_insights else None

    response = RouteOptimizationResponse(
        **route_report_to_json(report),
        ai_insights=ai_insights,
        metadata=metadata,
    )
    return report, response


def evaluate_waypoints(payload: RouteEvaluationRequest) -> RouteSummaryModel:
    waypoints = _to_waypoints(payload.waypoints)
    _validate_waypoint_ceiling(waypoints)
    return RouteSummaryModel(**route_report_to_json(evaluate_route(waypoints)))


def chat_route(payload: RouteChatRequest) -> RouteChatResponse:
    current_route = _to_waypoints(payload.current_route)
    _validate_waypoint_ceiling(current_route)
    history = [message.model_dump() for message in payload.conversation_history]

    advisor_reply = chat_about_route(payload.message, current_route, history)

    route_update = None
    if advisor_reply.route_update is not None:
        route_update = RouteSummaryModel(**route_report_to_json(advisor_reply.route_update))
    return RouteChatResponse(reply=advisor_reply.reply, route_update=route_update)
