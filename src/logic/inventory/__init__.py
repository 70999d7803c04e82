"""Inventory logic module.

This module contains the spreadsheet-backed inventory operations exposed to the
model as tools.
"""

from logic.inventory.service import InventoryService

__all__ = ["InventoryService"]
