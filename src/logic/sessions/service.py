"""In-memory conversation store keyed by chat identity."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from openai.types.chat import (
    ChatCompletionMessageParam,
    ChatCompletionSystemMessageParam,
    ChatCompletionToolParam,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Conversation:
    """One user's multi-turn conversation with the model.

    The lock serializes turns from the same chat so a second message waits for
    the previous tool round-trip to finish.
    """

    def __init__(
        self,
        chat_id: str,
        system_prompt: str,
        tools: list[ChatCompletionToolParam],
        created_at: datetime,
    ) -> None:
        self.chat_id = chat_id
        self.tools = tools
        self.messages: list[ChatCompletionMessageParam] = [
            ChatCompletionSystemMessageParam(role="system", content=system_prompt)
        ]
        self.created_at = created_at
        self.last_active_at = created_at
        self.lock = asyncio.Lock()

    @property
    def message_count(self) -> int:
        """Number of messages exchanged, excluding the system prompt."""
        return len(self.messages) - 1


class ConversationStore:
    """Holds one conversation per chat identity for the lifetime of the process.

    Conversations are created lazily and are never persisted. When an idle TTL
    is configured, conversations idle for longer are dropped the next time the
    store is accessed.
    """

    def __init__(
        self,
        system_prompt: str,
        tools: list[ChatCompletionToolParam],
        idle_ttl_seconds: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize conversation store.

        Args:
            system_prompt: Instructions every new conversation starts with
            tools: Tool definitions registered with every new conversation
            idle_ttl_seconds: Idle time after which a conversation expires
            clock: Source of the current time
        """
        self.system_prompt = system_prompt
        self.tools = tools
        self.idle_ttl = (
            timedelta(seconds=idle_ttl_seconds) if idle_ttl_seconds else None
        )
        self.clock = clock
        self._conversations: dict[str, Conversation] = {}

    def get_or_create(self, chat_id: str) -> Conversation:
        """Return the chat's conversation, creating it on first contact.

        Args:
            chat_id: Chat identity

        Returns:
            Conversation: Existing or newly created conversation
        """
        self._evict_expired()

        conversation = self._conversations.get(chat_id)
        if conversation is None:
            conversation = Conversation(
                chat_id, self.system_prompt, self.tools, self.clock()
            )
            self._conversations[chat_id] = conversation
            logger.info(f"Started new conversation for chat {chat_id}")

        conversation.last_active_at = self.clock()
        return conversation

    def get(self, chat_id: str) -> Conversation | None:
        """Get a conversation without creating one."""
        self._evict_expired()
        return self._conversations.get(chat_id)

    def list_active(self) -> list[Conversation]:
        """List active conversations, oldest first."""
        self._evict_expired()
        return sorted(self._conversations.values(), key=lambda c: c.created_at)

    def reset(self, chat_id: str) -> bool:
        """Forget a chat's conversation.

        Returns:
            bool: True if a conversation was dropped
        """
        removed = self._conversations.pop(chat_id, None) is not None
        if removed:
            logger.info(f"Reset conversation for chat {chat_id}")
        return removed

    def __len__(self) -> int:
        return len(self._conversations)

    def _evict_expired(self) -> None:
        if self.idle_ttl is None:
            return

        cutoff = self.clock() - self.idle_ttl
        expired = [
            chat_id
            for chat_id, conversation in self._conversations.items()
            if conversation.last_active_at < cutoff and not conversation.lock.locked()
        ]
        for chat_id in expired:
            del self._conversations[chat_id]
        if expired:
            logger.info(f"Expired {len(expired)} idle conversation(s)")
