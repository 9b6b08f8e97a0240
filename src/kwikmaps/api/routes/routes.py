"""Routing endpoints."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import Response

from ...schemas.routing import (
    RouteChatRequest,
    RouteChatResponse,
    RouteEvaluationRequest,
    RouteOptimizationRequest,
    RouteOptimizationResponse,
    RouteSummaryModel,
)
from ...services.insights.groq_client import CompletionNotConfiguredError, CompletionServiceError
from ...services.outputs.routing_formatter import route_report_to_csv
from ...services.routing.service import chat_route, evaluate_waypoints, optimize_route

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=RouteOptimizationResponse, status_code=status.HTTP_200_OK)
def optimize(
    payload: RouteOptimizationRequest,
    format: Literal["json", "csv"] = Query(default="json", description="Response format."),
):
    try:
        report, response = optimize_route(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to optimize route",
        ) from exc

    if format == "csv":
        return Response(
            content=route_report_to_csv(report),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="optimized_route.csv"'},
        )
    return response


@router.post("/evaluate", response_model=RouteSummaryModel, status_code=status.HTTP_200_OK)
def evaluate(payload: RouteEvaluationRequest) -> RouteSummaryModel:
    """Distance statistics for waypoints in the given order, without reordering."""
    try:
        return evaluate_waypoints(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/chat", response_model=RouteChatResponse, status_code=status.HTTP_200_OK)
def chat(payload: RouteChatRequest) -> RouteChatResponse:
    try:
        return chat_route(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except CompletionNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except CompletionServiceError as exc:
        logging.warning(f"Route chat failed: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="AI service error") from exc
