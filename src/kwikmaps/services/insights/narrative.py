"""Travel narrative for an optimized route.

The narrative is decoration on top of the numeric result: every failure is
turned into a fixed fallback message so that the route itself is always
returned.
"""

from __future__ import annotations

import logging

from ...config import settings
from ..routing.models import RouteReport
from .groq_client import CompletionNotConfiguredError, CompletionServiceError, EmptyCompletionError, GroqClient

logger = logging.getLogger(__name__)

FALLBACK_NOT_CONFIGURED = "AI insights unavailable: KWIK_GROQ_API_KEY not configured."
FALLBACK_UNAVAILABLE = "AI travel insights temporarily unavailable. Your route has still been optimized."
FALLBACK_EMPTY = "AI could not generate insights for this route, but your optimized route is ready."

SYSTEM_PROMPT = (
    "You are a knowledgeable travel planning assistant. Give practical, honest hotel and route advice "
    "with realistic price estimates. Be concise but thorough. Structure your response with clear sections. "
    "Do not use asterisks or markdown formatting; use plain text with dashes and numbers."
)


def build_insights_prompt(report: RouteReport) -> str:
    locations = "\n".join(
        f"{stop.order}. {stop.waypoint.name} ({stop.waypoint.latitude:.4f}, {stop.waypoint.longitude:.4f})"
        for stop in report.stops
    )
    legs = "\n".join(
        f"  Leg {index}: {leg.from_name} -> {leg.to_name} (~{leg.distance_miles} mi / {leg.distance_km_rounded} km)"
        for index, leg in enumerate(report.legs, start=1)
    )
    return f"""You are a travel planning expert. A user has planned a road trip with the following stops in optimized order:

{locations}

Route legs:
{legs}

Total straight-line distance: ~{report.total_distance_km:.1f} km (~{report.total_distance_miles:.1f} miles). Actual driving distance will be 20-40% longer due to roads.

Please provide:

1. ROUTE ASSESSMENT - Is this order logical? Any suggested swaps?

2. DAY-BY-DAY ITINERARY - Break this into realistic travel days. Assume the traveler can visit 2-3 locations per day depending on distances. For each day, list which stops to visit and approximate driving time.

3. HOTEL RECOMMENDATIONS - For each overnight stop:
   - Name the nearest town/city with hotels
   - If the stop is rural or remote, mention how far the nearest hotels are
   - Give price ranges for budget, mid-range and upscale tiers
   - Mention any well-known hotel chains in that area

4. PRACTICAL TIPS - Gas stations in remote stretches, food stops worth noting, any scenic routes or detours worth considering along the way.

Keep it well-structured, practical, and conversational. Use numbered lists and clear section headers. No markdown code blocks."""


def generate_travel_insights(report: RouteReport) -> str:
    """Return the provider's narrative for the route, or a fallback message."""
    try:
        client = GroqClient()
    except CompletionNotConfiguredError:
        logger.info("Skipping travel insights: chat-completions provider not configured")
        return FALLBACK_NOT_CONFIGURED

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_insights_prompt(report)},
    ]
    try:
        return client.complete(
            messages,
            temperature=settings.insights_temperature,
            max_tokens=settings.insights_max_tokens,
        )
    except EmptyCompletionError:
        return FALLBACK_EMPTY
    except CompletionServiceError as exc:
        logger.warning(f"Travel insights unavailable: {exc}")
        return FALLBACK_UNAVAILABLE
