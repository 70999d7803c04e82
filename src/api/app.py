"""FastAPI application builder with dependency injection and lifecycle management."""

import contextlib
import logging
import typing

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import dependencies
from config import Settings, configure_logging
from container import ServiceContainer
from domain.schemas import ErrorResponse

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


def include_routers(app: FastAPI) -> None:
    """Include all API routers.

    Args:
        app: FastAPI application instance
    """
    from api.routers.chat import router as chat_router
    from api.routers.health import router as health_router
    from api.routers.inventory import router as inventory_router
    from api.routers.sessions import router as sessions_router

    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(chat_router)
    app.include_router(inventory_router)


class AppBuilder:
    """Application builder with dependency injection and lifecycle management.

    The service container is started in the lifespan hook, so an unreachable
    spreadsheet stops the server before it accepts requests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        container: ServiceContainer | None = None,
    ) -> None:
        """Initialize the application builder.

        Args:
            settings: Settings to use instead of the environment
            container: Pre-built container; skips startup when given
        """
        from config import get_settings

        self.settings = settings or get_settings()
        configure_logging(self.settings.app_log_level)

        self._container = container
        self._owns_container = container is None

        self.app: FastAPI = FastAPI(
            title="Sheets Inventory Agent",
            description="Chat with a Google Sheets inventory through a tool-calling model",
            version=APP_VERSION,
            debug=self.settings.app_log_level == "DEBUG",
            lifespan=self.lifespan_manager,
        )

        self._configure_middleware()
        self._configure_exception_handlers()
        self._setup_dependency_overrides()
        include_routers(self.app)
        self._add_root_endpoint()

    def _configure_middleware(self) -> None:
        """Configure FastAPI middleware."""
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _configure_exception_handlers(self) -> None:
        """Configure global exception handlers."""

        @self.app.exception_handler(Exception)
        async def global_exception_handler(request, exc):
            """Global exception handler for unhandled errors."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(
                    error="Internal server error",
                    detail="An unexpected error occurred",
                ).model_dump(),
            )

    def _setup_dependency_overrides(self) -> None:
        """Set up dependency injection overrides."""
        self.app.dependency_overrides[dependencies.get_container] = (
            self._get_container
        )

    def _add_root_endpoint(self) -> None:
        """Add root API endpoint."""

        @self.app.get("/", tags=["root"])
        async def root() -> dict[str, str]:
            """Root endpoint with API information."""
            return {
                "name": "Sheets Inventory Agent",
                "version": APP_VERSION,
                "docs": "/docs",
                "health": "/health",
            }

    def _get_container(self) -> ServiceContainer:
        """Dependency override for the service container.

        Raises:
            RuntimeError: If the container has not been started
        """
        if self._container is None or self._container.agent is None:
            raise RuntimeError("Service container not initialized")
        return self._container

    async def init_async_resources(self) -> None:
        """Start the service container unless one was supplied."""
        logger.info(f"Starting Sheets Inventory Agent v{APP_VERSION}")
        logger.info(f"Log level: {self.settings.app_log_level}")

        if self._container is None:
            self._container = ServiceContainer(self.settings)
            await self._container.start()

    async def tear_down(self) -> None:
        """Clean up async resources."""
        logger.info("Shutting down Sheets Inventory Agent")
        if self._container is not None and self._owns_container:
            await self._container.close()

    @contextlib.asynccontextmanager
    async def lifespan_manager(
        self, _: FastAPI
    ) -> typing.AsyncIterator[dict[str, typing.Any]]:
        """Lifespan context manager for FastAPI application.

        Args:
            _: FastAPI application instance (unused)

        Yields:
            dict: Lifespan state (empty dict)
        """
        try:
            await self.init_async_resources()
            yield {}
        finally:
            await self.tear_down()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    return AppBuilder().app
