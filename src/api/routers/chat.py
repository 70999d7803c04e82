"""Chat messaging API endpoints with SSE support."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sse_starlette.sse import EventSourceResponse

from api.dependencies import get_agent_service
from api.routers.utils import create_error_event, create_sse_event, handle_router_error
from domain.schemas import ChatReplyResponse, SendMessageRequest
from logic.chat import AgentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chats/{chat_id}/messages", tags=["chat"])

ChatId = Annotated[str, Path(min_length=1, max_length=128, description="Chat identifier")]


@router.post(
    "",
    response_model=ChatReplyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message and get the assistant's reply",
    description="Runs one turn; the chat's conversation is created on first use",
)
async def send_message(
    chat_id: ChatId,
    request: SendMessageRequest,
    agent_service: Annotated[AgentService, Depends(get_agent_service)],
) -> ChatReplyResponse:
    """Send a message and get the assistant's reply."""
    try:
        reply = await agent_service.process_message(chat_id, request.content)
    except Exception as e:
        raise handle_router_error("processing message for chat", chat_id, e)

    return ChatReplyResponse(chat_id=chat_id, content=reply)


@router.post(
    "/stream",
    summary="Send a message with SSE streaming",
    description="Send a message and receive the reply via Server-Sent Events",
)
async def send_message_stream(
    chat_id: ChatId,
    request: SendMessageRequest,
    agent_service: Annotated[AgentService, Depends(get_agent_service)],
) -> EventSourceResponse:
    """Send a message and stream the reply via SSE."""

    async def event_generator():
        """Generate SSE events for the chat reply."""
        try:
            yield create_sse_event("typing", {"chat_id": chat_id, "typing": True})

            reply = await agent_service.process_message(chat_id, request.content)
            message = ChatReplyResponse(chat_id=chat_id, content=reply)

            yield create_sse_event("message", message.model_dump(mode="json"))
            yield create_sse_event("done", {"chat_id": chat_id})

        except Exception as e:
            logger.error(f"Error in SSE stream for chat {chat_id}: {e}", exc_info=True)
            yield create_error_event(str(e), chat_id)

    return EventSourceResponse(event_generator())
