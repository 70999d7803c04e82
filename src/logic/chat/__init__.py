"""Chat logic module.

This module contains the turn loop, the inventory tool registry and the
dispatcher that executes tool calls.
"""

from logic.chat.service import AgentService, MessageFormatter, TurnState
from logic.chat.tools import InventoryTool, ToolDispatcher, get_tool_definitions

__all__ = [
    "AgentService",
    "InventoryTool",
    "MessageFormatter",
    "ToolDispatcher",
    "TurnState",
    "get_tool_definitions",
]
