"""Inventory tools exposed to the model and the dispatcher that runs them."""

import json
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from openai.types.chat import ChatCompletionToolParam

from domain.entities import ToolCall, ToolEnvelope
from logic.inventory import InventoryService

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Awaitable[str]]


class InventoryTool(str, Enum):
    """Operations the model is allowed to request."""

    READ_INVENTORY = "readInventory"
    ADD_ROW = "addRow"
    UPDATE_ITEM_QUANTITY = "updateItemQuantity"


TOOL_DEFINITIONS: list[ChatCompletionToolParam] = [
    {
        "type": "function",
        "function": {
            "name": InventoryTool.READ_INVENTORY.value,
            "description": "Reads and lists all items currently in the inventory spreadsheet.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": InventoryTool.ADD_ROW.value,
            "description": "Adds a new item with its quantity and price to the inventory spreadsheet.",
            "parameters": {
                "type": "object",
                "properties": {
                    "itemName": {
                        "type": "string",
                        "description": "The name of the item to add.",
                    },
                    "quantity": {
                        "type": "number",
                        "description": "The quantity of the new item.",
                    },
                    "price": {
                        "type": "number",
                        "description": "The price of a single unit of the new item.",
                    },
                },
                "required": ["itemName", "quantity", "price"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": InventoryTool.UPDATE_ITEM_QUANTITY.value,
            "description": "Updates the quantity of an existing item in the inventory spreadsheet.",
            "parameters": {
                "type": "object",
                "properties": {
                    "itemName": {
                        "type": "string",
                        "description": "The name of the item whose quantity needs to be updated.",
                    },
                    "newQuantity": {
                        "type": "number",
                        "description": "The new quantity for the item.",
                    },
                },
                "required": ["itemName", "newQuantity"],
            },
        },
    },
]


def get_tool_definitions() -> list[ChatCompletionToolParam]:
    """Get the tool definitions registered with every conversation."""
    return TOOL_DEFINITIONS


def parameter_order(tool: InventoryTool) -> list[str]:
    """Names of a tool's parameters in declaration order."""
    for definition in TOOL_DEFINITIONS:
        if definition["function"]["name"] == tool.value:
            return list(definition["function"]["parameters"]["properties"])
    return []


def parse_tool_call(call_id: str, name: str, raw_arguments: str | None) -> ToolCall:
    """Build a ToolCall from the model's JSON argument string.

    Raises:
        ValueError: If the arguments are not a JSON object
    """
    arguments = json.loads(raw_arguments) if raw_arguments else {}
    if not isinstance(arguments, dict):
        raise ValueError("tool arguments must be a JSON object")
    return ToolCall(id=call_id, name=name, arguments=arguments)


class ToolDispatcher:
    """Maps tool calls to inventory operations.

    dispatch() never raises: every outcome, including unknown tools and
    failing handlers, comes back as a ToolEnvelope the model can read.
    """

    def __init__(self, inventory: InventoryService) -> None:
        """Initialize tool dispatcher.

        Args:
            inventory: Inventory service the tools operate on
        """
        self.handlers: dict[InventoryTool, ToolHandler] = {
            InventoryTool.READ_INVENTORY: inventory.read_inventory,
            InventoryTool.ADD_ROW: inventory.add_row,
            InventoryTool.UPDATE_ITEM_QUANTITY: inventory.update_item_quantity,
        }

    async def dispatch(self, tool_call: ToolCall) -> ToolEnvelope:
        """Execute a tool call and wrap its outcome.

        Arguments are passed positionally in the tool's declared parameter
        order.

        Args:
            tool_call: Tool call requested by the model

        Returns:
            ToolEnvelope: Result or error description
        """
        name = tool_call.name
        logger.info(f"Model requested tool: {name} with args: {tool_call.arguments}")

        try:
            tool = InventoryTool(name)
        except ValueError:
            logger.error(f"Error: Function {name} not found in tool registry")
            return ToolEnvelope(
                name=name,
                content=f"Error: Function {name} is not implemented.",
                is_error=True,
            )

        try:
            args = self._positional_arguments(tool, tool_call.arguments)
            result = await self.handlers[tool](*args)
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}", exc_info=True)
            return ToolEnvelope(
                name=name,
                content=f"Error: Failed to execute tool {name}. {e}",
                is_error=True,
            )

        return ToolEnvelope(name=name, content=result)

    @staticmethod
    def _positional_arguments(
        tool: InventoryTool, arguments: dict[str, Any]
    ) -> list[Any]:
        names = parameter_order(tool)
        missing = [param for param in names if param not in arguments]
        if missing:
            raise ValueError(f"Missing required argument(s): {', '.join(missing)}")
        return [arguments[param] for param in names]
