"""API request and response schemas."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


# Request Schemas
class SendMessageRequest(BaseModel):
    """Request to send a message in a chat."""

    content: str = Field(..., min_length=1, description="Message content")


# Response Schemas
class ChatReplyResponse(BaseModel):
    """Response containing the assistant's reply to one message."""

    chat_id: str
    role: Literal["assistant"] = "assistant"
    content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ConversationResponse(BaseModel):
    """Response describing an active conversation."""

    chat_id: str
    message_count: int
    created_at: datetime
    last_active_at: datetime


class ConversationListResponse(BaseModel):
    """Response containing the active conversations."""

    conversations: list[ConversationResponse]
    total: int


class InventoryResponse(BaseModel):
    """Response containing the rendered inventory summary."""

    summary: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str = "0.1.0"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
