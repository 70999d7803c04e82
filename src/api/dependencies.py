"""Dependency injection placeholders for FastAPI.

get_container is overridden by AppBuilder at runtime.
The service getters below resolve through the container.
"""

from typing import Annotated

from fastapi import Depends

from container import ServiceContainer
from logic.chat import AgentService
from logic.inventory import InventoryService
from logic.sessions import ConversationStore


# Placeholder dependency - will be overridden by AppBuilder
def get_container() -> ServiceContainer:
    """Service container dependency.

    This is a placeholder that will be overridden by AppBuilder.
    Use with FastAPI Depends():
        container: ServiceContainer = Depends(get_container)

    Raises:
        NotImplementedError: If called before AppBuilder initialization
    """
    raise NotImplementedError("Service container not initialized. Use AppBuilder.")


def get_agent_service(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> AgentService:
    """Agent service dependency."""
    return container.agent  # type: ignore[return-value]


def get_conversation_store(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> ConversationStore:
    """Conversation store dependency."""
    return container.conversations  # type: ignore[return-value]


def get_inventory_service(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> InventoryService:
    """Inventory service dependency."""
    return container.inventory  # type: ignore[return-value]
