"""Verification dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends, HTTPException, Path, status

from api.dependencies import get_conversation_store
from logic.sessions import Conversation, ConversationStore


async def verify_conversation_exists(
    chat_id: Annotated[str, Path(description="Chat identifier")],
    conversations: Annotated[ConversationStore, Depends(get_conversation_store)],
) -> Conversation:
    """Verify that a chat has an active conversation and return it.

    Args:
        chat_id: Chat identifier from path parameter
        conversations: Injected conversation store

    Returns:
        Conversation: The active conversation

    Raises:
        HTTPException: 404 if the chat has no conversation
    """
    conversation = conversations.get(chat_id)
    if conversation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Chat {chat_id} not found",
        )
    return conversation
