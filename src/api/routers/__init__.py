"""API routers package."""

from api.routers.chat import router as chat_router
from api.routers.health import router as health_router
from api.routers.inventory import router as inventory_router
from api.routers.sessions import router as sessions_router

__all__ = ["chat_router", "health_router", "inventory_router", "sessions_router"]
