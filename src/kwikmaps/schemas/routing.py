"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field


class WaypointModel(BaseModel):
    id: Optional[str] = Field(
        default=None,
        description="Caller identifier. Defaults to the 1-based position in the request.",
    )
    name: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)


class RouteOptimizationRequest(BaseModel):
    waypoints: List[WaypointModel] = Field(
        ...,
        validation_alias=AliasChoices("waypoints", "coordinates"),
        description="Waypoints to visit. The first entry is the starting point.",
    )
    include_insights: bool = Field(
        default=True,
        description="Ask the chat-completions provider for a travel narrative.",
    )


class RouteEvaluationRequest(BaseModel):
    waypoints: List[WaypointModel] = Field(
        ...,
        validation_alias=AliasChoices("waypoints", "coordinates"),
        description="Waypoints in the order they will be visited.",
    )


class OrderedWaypointModel(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    order: int


class RouteLegModel(BaseModel):
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    distance_km: float
    distance_miles: float


class RouteSummaryModel(BaseModel):
    optimized_route: List[OrderedWaypointModel]
    total_distance_km: float
    total_distance_miles: float
    legs: List[RouteLegModel]


class RouteOptimizationResponse(RouteSummaryModel):
    success: bool = True
    ai_insights: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class ChatMessageModel(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class RouteChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    current_route: List[WaypointModel] = Field(..., min_length=1)
    conversation_history: List[ChatMessageModel] = Field(default_factory=list)


class RouteChatResponse(BaseModel):
    success: bool = True
    reply: str
    route_update: Optional[RouteSummaryModel] = None
