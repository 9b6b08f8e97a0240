"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...services.insights.groq_client import check_configured

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/insights", status_code=status.HTTP_200_OK)
def health_insights() -> dict:
    """Report whether the chat-completions provider is configured. No request is made."""
    return {
        "service": "insights",
        "configured": check_configured(),
        "model": settings.groq_model,
    }
