"""Builds and tears down the services shared by every entry point."""

import logging

from config import Settings
from infrastructure.openai_client import OpenAIClient
from infrastructure.sheets_client import SheetsClient
from logic.chat import AgentService, ToolDispatcher, get_tool_definitions
from logic.chat.service import SYSTEM_PROMPT
from logic.inventory import InventoryService
from logic.sessions import ConversationStore

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Owns the clients and services for one process.

    Call start() before use and close() on shutdown. Tests build a container
    from prepared parts with from_parts().
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.openai_client: OpenAIClient | None = None
        self.sheets_client: SheetsClient | None = None
        self.inventory: InventoryService | None = None
        self.conversations: ConversationStore | None = None
        self.agent: AgentService | None = None

    @classmethod
    def from_parts(
        cls,
        settings: Settings,
        openai_client: OpenAIClient,
        inventory: InventoryService,
        conversations: ConversationStore | None = None,
    ) -> "ServiceContainer":
        """Assemble a container around existing clients without connecting."""
        container = cls(settings)
        container.openai_client = openai_client
        container.inventory = inventory
        container.conversations = conversations or container._build_conversations()
        container.agent = AgentService(
            openai_client=openai_client,
            dispatcher=ToolDispatcher(inventory),
            conversations=container.conversations,
        )
        return container

    def _build_conversations(self) -> ConversationStore:
        return ConversationStore(
            system_prompt=SYSTEM_PROMPT,
            tools=get_tool_definitions(),
            idle_ttl_seconds=self.settings.session_idle_ttl_seconds,
        )

    async def start(self) -> None:
        """Authenticate, verify the spreadsheet and build the services.

        Raises:
            SheetsConnectionError: If the spreadsheet cannot be reached
        """
        settings = self.settings
        logger.info(f"Model: {settings.openai_model}")

        self.sheets_client = SheetsClient.from_service_account_file(
            settings.google_service_account_file, settings.spreadsheet_id
        )
        await self.sheets_client.verify_connection()

        self.openai_client = OpenAIClient(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            timeout=settings.openai_timeout,
            max_retries=settings.openai_max_retries,
            temperature=settings.openai_temperature,
        )

        self.inventory = InventoryService(
            self.sheets_client,
            worksheet_name=settings.worksheet_name,
            columns=settings.inventory_columns,
        )
        self.conversations = self._build_conversations()
        self.agent = AgentService(
            openai_client=self.openai_client,
            dispatcher=ToolDispatcher(self.inventory),
            conversations=self.conversations,
        )
        logger.info(f"Inventory worksheet ready: {settings.worksheet_name}")

    async def close(self) -> None:
        """Release network clients."""
        if self.openai_client is not None:
            await self.openai_client.close()

        if self.sheets_client is not None:
            await self.sheets_client.close()

        logger.info("Cleanup completed")
