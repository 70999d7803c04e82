"""Health check and monitoring endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_conversation_store
from domain.schemas import HealthResponse
from logic.sessions import ConversationStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Check if the API is running and healthy",
)
async def health_check() -> HealthResponse:
    """Health check endpoint for monitoring and load balancers."""
    return HealthResponse(status="healthy", timestamp=datetime.now(UTC))


@router.get(
    "/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
)
async def readiness_check(
    conversations: Annotated[ConversationStore, Depends(get_conversation_store)],
) -> dict[str, str | int]:
    """Readiness check; fails until the spreadsheet connection is up."""
    return {"status": "ready", "conversations": len(conversations)}


@router.get(
    "/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def liveness_check() -> dict[str, str]:
    """Liveness check for Kubernetes probes."""
    return {"status": "alive"}
