"""Route-advisor chat: discuss a route and apply reorderings the advisor agrees to."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Waypoint
from ..routing.models import RouteReport
from ..routing.reporter import evaluate_route
from .groq_client import GroqClient

ROUTE_UPDATE_PATTERN = re.compile(r"ROUTE_UPDATE:\s*\[([^\]]+)\]")
ROUTE_UPDATE_LINE_PATTERN = re.compile(r"\n?ROUTE_UPDATE:\s*\[[^\]]+\]")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AdvisorReply:
    reply: str
    route_update: Optional[RouteReport]


def build_advisor_prompt(current_route: Sequence[Waypoint]) -> str:
    stop_count = len(current_route)
    report = evaluate_route(current_route)
    route_description = "\n".join(
        f"Stop {index}: {waypoint.name} ({waypoint.latitude:.4f}, {waypoint.longitude:.4f})"
        for index, waypoint in enumerate(current_route, start=1)
    )
    example = ",".join(str(number) for number in [3, 1, 2] + list(range(4, max(stop_count, 3) + 1)))
    return f"""You are an AI travel route advisor for KwikMaps. The user has an optimized route and wants to discuss or modify it.

CURRENT ROUTE ({stop_count} stops, ~{report.total_distance_miles} miles total):
{route_description}

RULES FOR RESPONDING:
1. When the user suggests reordering (e.g., "swap stops 3 and 5" or "move Memphis to the end"), evaluate whether this is a good idea.
2. Consider total distance, logical geographic flow, hotel availability, and practical driving concerns.
3. If the suggestion makes sense or the user insists, agree and provide the new order.
4. If the suggestion would make the route significantly worse, explain why respectfully but if the user insists, comply.

WHEN YOU AGREE TO A ROUTE CHANGE:
You MUST include a special line at the VERY END of your response in this EXACT format:
ROUTE_UPDATE:[{example}]

The numbers are STOP NUMBERS referring to the current order above. List ALL {stop_count} stop numbers in the new desired order, every stop number from 1 to {stop_count} exactly once.
This line MUST be the very last line of your response with NO text after it. Do NOT use location names or IDs in the ROUTE_UPDATE, only stop numbers.

If you are NOT changing the route, do NOT include any ROUTE_UPDATE line.

When the user references stops by number, those numbers refer to the current order shown above.
When the user references stops by name, map them to the stop numbers above.
If they only mention a few stops, assume unmentioned stops keep their relative position but are placed after the mentioned ones.

Keep responses conversational, practical, and concise. Do not use asterisks or markdown code blocks. Use plain text."""


def parse_route_update(reply: str, stop_count: int) -> tuple[str, Optional[list[int]]]:
    """Split a ``ROUTE_UPDATE:[...]`` directive off the reply.

    Returns the reply without the directive and the 1-based stop numbers, or
    ``None`` when there is no directive or it is not a full permutation of
    ``1..stop_count``.
    """
    match = ROUTE_UPDATE_PATTERN.search(reply)
    if not match:
        return reply, None

    display_reply = ROUTE_UPDATE_LINE_PATTERN.sub("", reply, count=1).strip()

    stop_numbers: list[int] = []
    for token in match.group(1).split(","):
        try:
            stop_numbers.append(int(token.strip()))
        except ValueError:
            continue

    valid = (
        len(stop_numbers) == stop_count
        and all(1 <= number <= stop_count for number in stop_numbers)
        and len(set(stop_numbers)) == stop_count
    )
    if not valid:
        logger.warning(f"Ignoring invalid route update {stop_numbers} for {stop_count} stops")
        return display_reply, None
    return display_reply, stop_numbers


def chat_about_route(
    message: str,
    current_route: Sequence[Waypoint],
    conversation_history: Sequence[dict[str, str]] = (),
) -> AdvisorReply:
    """Ask the advisor about the route. Provider errors propagate to the caller."""
    client = GroqClient()

    messages = [{"role": "system", "content": build_advisor_prompt(current_route)}]
    messages.extend(conversation_history)
    messages.append({"role": "user", "content": message})

    reply = client.complete(
        messages,
        temperature=settings.chat_temperature,
        max_tokens=settings.chat_max_tokens,
    )
    display_reply, stop_numbers = parse_route_update(reply, len(current_route))
    if stop_numbers is None:
        return AdvisorReply(reply=display_reply, route_update=None)

    reordered = [current_route[number - 1] for number in stop_numbers]
    return AdvisorReply(reply=display_reply, route_update=evaluate_route(reordered))
