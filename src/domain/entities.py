"""Domain entities representing core business objects."""

from typing import Any

from pydantic import BaseModel, Field

INVENTORY_HEADERS = ("Name", "Quantity", "Price", "Last Updated")


class InventoryItem(BaseModel):
    """A single inventory row, keyed by its header names."""

    name: str = ""
    quantity: str = ""
    price: str = ""
    last_updated: str = ""

    @classmethod
    def from_row(cls, headers: list[str], row: list[Any]) -> "InventoryItem":
        """Associate a row's cells with headers positionally.

        Cells missing from the end of a short row are treated as empty strings.
        """
        record = {
            header: str(row[index]) if index < len(row) else ""
            for index, header in enumerate(headers)
        }
        name, quantity, price, last_updated = (
            record.get(header, "") for header in INVENTORY_HEADERS
        )
        return cls(
            name=name, quantity=quantity, price=price, last_updated=last_updated
        )

    def render(self) -> str:
        """Render the item as a single-line summary."""
        return (
            f"- Item: {self.name}, Quantity: {self.quantity}, "
            f"Price: ${self.price}, Last Updated: {self.last_updated}"
        )


class ToolCall(BaseModel):
    """Represents a tool call requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolEnvelope(BaseModel):
    """Result of a tool call, sent back to the model.

    The payload is always a string: either the tool's result or a
    description of what went wrong.
    """

    name: str
    content: str
    is_error: bool = False
