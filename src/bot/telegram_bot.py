"""Telegram bot front-end for the inventory assistant."""

import logging
import sys

from telegram import Update
from telegram.constants import ChatAction, MessageLimit
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from config import Settings, configure_logging, get_settings
from container import ServiceContainer
from infrastructure.sheets_client import SheetsConnectionError

logger = logging.getLogger(__name__)

GREETING = (
    "Hi! I manage your inventory spreadsheet.\n\n"
    "Try:\n"
    "- Read the inventory\n"
    "- Add a new item called Laptop, quantity 5, price 1200\n"
    "- Update the quantity of Mouse to 55\n\n"
    "Send /reset to start a fresh conversation."
)


def split_message(text: str, limit: int = MessageLimit.MAX_TEXT_LENGTH) -> list[str]:
    """Split a reply into chunks Telegram accepts."""
    return [text[i : i + limit] for i in range(0, len(text), limit)] or [""]


class InventoryBot:
    """Routes Telegram updates to the agent, one conversation per chat."""

    def __init__(self, container: ServiceContainer) -> None:
        self.container = container

    async def handle_start(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /start command."""
        await update.message.reply_text(GREETING)

    async def handle_reset(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /reset command - forget this chat's conversation."""
        self.container.conversations.reset(str(update.effective_chat.id))
        await update.message.reply_text("Conversation cleared. Fresh start.")

    async def handle_message(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle a text message by running one agent turn."""
        chat_id = str(update.effective_chat.id)
        text = update.message.text
        logger.info(f"Message from chat {chat_id}: {text}")

        await update.effective_chat.send_action(ChatAction.TYPING)
        reply = await self.container.agent.process_message(chat_id, text)

        for chunk in split_message(reply):
            await update.message.reply_text(chunk)

    async def handle_error(
        self, update: object, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Log errors raised while handling an update."""
        logger.error(
            f"Exception while handling an update: {context.error}",
            exc_info=context.error,
        )

    async def _post_init(self, application: Application) -> None:
        await self.container.start()
        logger.info("Inventory bot is online")

    async def _post_shutdown(self, application: Application) -> None:
        await self.container.close()

    def build_application(self, token: str) -> Application:
        """Create the Telegram application with all handlers registered."""
        application = (
            Application.builder()
            .token(token)
            .concurrent_updates(True)
            .post_init(self._post_init)
            .post_shutdown(self._post_shutdown)
            .build()
        )
        application.add_handler(CommandHandler("start", self.handle_start))
        application.add_handler(CommandHandler("reset", self.handle_reset))
        application.add_handler(
            MessageHandler(
                filters.UpdateType.MESSAGE & filters.TEXT & ~filters.COMMAND,
                self.handle_message,
            )
        )
        application.add_error_handler(self.handle_error)
        return application


def run_bot(settings: Settings) -> int:
    """Run the bot with long polling until interrupted.

    Returns:
        int: Process exit status
    """
    if not settings.telegram_bot_token:
        logger.error("TELEGRAM_BOT_TOKEN not set")
        return 1

    bot = InventoryBot(ServiceContainer(settings))
    application = bot.build_application(settings.telegram_bot_token)

    try:
        application.run_polling(allowed_updates=Update.ALL_TYPES)
    except SheetsConnectionError as e:
        logger.error(str(e))
        return 1
    return 0


def main() -> None:
    """Console script entry point."""
    settings = get_settings()
    configure_logging(settings.app_log_level)
    sys.exit(run_bot(settings))


if __name__ == "__main__":
    main()
