"""Conversation management API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_conversation_store
from api.routers.utils import convert_conversation_to_response
from api.routers.verifications import verify_conversation_exists
from domain.schemas import ConversationListResponse, ConversationResponse
from logic.sessions import Conversation, ConversationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chats", tags=["chats"])


@router.get(
    "",
    response_model=ConversationListResponse,
    summary="List active conversations",
)
async def list_conversations(
    conversations: Annotated[ConversationStore, Depends(get_conversation_store)],
) -> ConversationListResponse:
    """List every chat with an open conversation."""
    active = conversations.list_active()
    return ConversationListResponse(
        conversations=[convert_conversation_to_response(c) for c in active],
        total=len(active),
    )


@router.get(
    "/{chat_id}",
    response_model=ConversationResponse,
    summary="Get a conversation",
)
async def get_conversation(
    conversation: Annotated[Conversation, Depends(verify_conversation_exists)],
) -> ConversationResponse:
    """Get a chat's conversation."""
    return convert_conversation_to_response(conversation)


@router.delete(
    "/{chat_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reset a conversation",
    description="Forget a chat's conversation; its next message starts a new one",
)
async def reset_conversation(
    conversation: Annotated[Conversation, Depends(verify_conversation_exists)],
    conversations: Annotated[ConversationStore, Depends(get_conversation_store)],
) -> None:
    """Reset a chat's conversation."""
    conversations.reset(conversation.chat_id)
