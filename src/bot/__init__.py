"""Telegram bot package."""

from bot.telegram_bot import InventoryBot, run_bot

__all__ = ["InventoryBot", "run_bot"]
