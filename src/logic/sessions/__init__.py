"""Sessions logic module.

This module keeps the per-chat conversations the turn loop runs against.
"""

from logic.sessions.service import Conversation, ConversationStore

__all__ = ["Conversation", "ConversationStore"]
