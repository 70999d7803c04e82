"""Inventory operations backed by a Google Sheets worksheet.

Each operation returns a human-readable string instead of raising. The strings
are fed to the model as tool results, so failures are described rather than
propagated.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

from domain.entities import InventoryItem
from infrastructure.sheets_client import column_letter, sheet_range

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_DATA_MESSAGE = "No data found in inventory."
READ_FAILED_MESSAGE = "Failed to read inventory."
MISSING_COLUMNS_MESSAGE = (
    "Error: Missing expected column (Name, Quantity, or Last Updated) in your "
    "sheet headers. Please ensure the sheet has these exact headers."
)


class ValuesBackend(Protocol):
    """The subset of the Sheets values API the inventory relies on."""

    async def get_values(self, range_a1: str) -> list[list[Any]]: ...

    async def append_row(self, range_a1: str, row: list[Any]) -> None: ...

    async def batch_update(self, data: dict[str, list[list[Any]]]) -> None: ...


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp the way the Last Updated column stores it."""
    return moment.strftime(TIMESTAMP_FORMAT)


class InventoryService:
    """Reads and edits the inventory table by header name, not by position."""

    def __init__(
        self,
        backend: ValuesBackend,
        worksheet_name: str,
        columns: str = "A:D",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize inventory service.

        Args:
            backend: Sheets values backend
            worksheet_name: Worksheet holding the inventory
            columns: Column span read from the worksheet, e.g. "A:D"
            clock: Source of the current time for Last Updated
        """
        self.backend = backend
        self.worksheet_name = worksheet_name
        self.columns = columns
        self.clock = clock

    @property
    def table_range(self) -> str:
        return sheet_range(self.worksheet_name, self.columns)

    async def read_inventory(self) -> str:
        """Read and list every item in the inventory.

        Returns:
            str: One line per item, or a fixed message if there is no data
        """
        logger.info("Reading current inventory")
        try:
            rows = await self.backend.get_values(self.table_range)
        except Exception as e:
            logger.error(f"The API returned an error reading data: {e}")
            return READ_FAILED_MESSAGE

        if len(rows) < 2:
            return NO_DATA_MESSAGE

        headers = [str(header) for header in rows[0]]
        items = [InventoryItem.from_row(headers, row) for row in rows[1:]]

        lines = ["Current Inventory:"]
        lines.extend(item.render() for item in items)
        return "\n".join(lines) + "\n"

    async def add_row(self, item_name: str, quantity: float, price: float) -> str:
        """Append a new item stamped with the current time."""
        logger.info(f"Attempting to add new item: {item_name}")
        values = [item_name, quantity, price, format_timestamp(self.clock())]

        try:
            await self.backend.append_row(sheet_range(self.worksheet_name), values)
        except Exception as e:
            logger.error(f"The API returned an error adding row: {e}")
            return f"Failed to add '{item_name}'."

        return f"Successfully added '{item_name}' to the inventory."

    async def update_item_quantity(self, item_name: str, new_quantity: float) -> str:
        """Set the quantity of the first item whose name matches, ignoring case.

        Quantity and Last Updated are written together in one batch request.

        Args:
            item_name: Name of the item to update
            new_quantity: Quantity to store

        Returns:
            str: Confirmation, not-found message, or failure description
        """
        logger.info(f"Attempting to update item: {item_name} to quantity {new_quantity}")
        not_found = f"Item '{item_name}' not found in inventory."

        try:
            rows = await self.backend.get_values(self.table_range)
            if not rows:
                return not_found

            headers = [str(header) for header in rows[0]]
            try:
                name_col = headers.index("Name")
                quantity_col = headers.index("Quantity")
                updated_col = headers.index("Last Updated")
            except ValueError:
                return MISSING_COLUMNS_MESSAGE

            target = item_name.lower()
            row_number = None
            # Sheets rows are 1-indexed and row 1 holds the headers
            for number, row in enumerate(rows[1:], start=2):
                if name_col < len(row) and str(row[name_col]).lower() == target:
                    row_number = number
                    break

            if row_number is None:
                return not_found

            await self.backend.batch_update(
                {
                    self._cell(quantity_col, row_number): [[new_quantity]],
                    self._cell(updated_col, row_number): [
                        [format_timestamp(self.clock())]
                    ],
                }
            )
        except Exception as e:
            logger.error(f"The API returned an error updating item: {e}")
            return f"Failed to update '{item_name}'."

        return f"Updated quantity of '{item_name}' to {new_quantity}."

    def _cell(self, column_index: int, row_number: int) -> str:
        return sheet_range(
            self.worksheet_name, f"{column_letter(column_index)}{row_number}"
        )
