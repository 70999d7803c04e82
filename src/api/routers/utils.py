"""Utility functions for API routers."""

import json
import logging
from typing import Any

from fastapi import HTTPException, status

from domain.schemas import ConversationResponse
from logic.sessions import Conversation

logger = logging.getLogger(__name__)


def handle_router_error(
    operation: str, identifier: str, error: Exception
) -> HTTPException:
    """Handle router errors with consistent logging and HTTP responses.

    Args:
        operation: Description of the operation (e.g., "resetting chat")
        identifier: Resource identifier (e.g., chat_id)
        error: The exception that occurred

    Returns:
        HTTPException: Formatted HTTP exception
    """
    logger.error(f"Error {operation} {identifier}: {error}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed {operation}",
    )


def convert_conversation_to_response(conversation: Conversation) -> ConversationResponse:
    """Convert a conversation to its API schema."""
    return ConversationResponse(
        chat_id=conversation.chat_id,
        message_count=conversation.message_count,
        created_at=conversation.created_at,
        last_active_at=conversation.last_active_at,
    )


def create_sse_event(event: str, data: dict[str, Any]) -> dict[str, str]:
    """Create a Server-Sent Event (SSE) formatted event.

    Args:
        event: Event type (e.g., "message", "error", "typing")
        data: Event data to be JSON serialized

    Returns:
        dict: SSE event dictionary with 'event' and 'data' keys
    """
    return {
        "event": event,
        "data": json.dumps(data),
    }


def create_error_event(error: str, chat_id: str) -> dict[str, str]:
    """Create an SSE error event."""
    return create_sse_event(
        event="error",
        data={"error": error, "chat_id": chat_id},
    )
