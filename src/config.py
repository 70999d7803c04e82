"""Application configuration using Pydantic settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Model Configuration
    openai_api_key: str = Field(..., description="OpenAI API key")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible base URL (OpenRouter, Ollama, Gemini)",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model name used for tool calling",
    )
    openai_timeout: int = Field(default=60, description="Request timeout in seconds")
    openai_max_retries: int = Field(default=3, description="Max retry attempts")
    openai_temperature: float = Field(
        default=0.2, ge=0, le=2, description="Sampling temperature"
    )

    # Google Sheets Configuration
    google_service_account_file: str = Field(
        default="credentials.json",
        description="Path to the service-account JSON key file",
    )
    spreadsheet_id: str = Field(..., description="Google Sheets spreadsheet ID")
    worksheet_name: str = Field(
        default="Sheet1", description="Worksheet (tab) holding the inventory"
    )
    inventory_columns: str = Field(
        default="A:D",
        description="Column range read from the worksheet, in A1 notation",
    )

    # Telegram Configuration
    telegram_bot_token: str | None = Field(
        default=None, description="Telegram bot token"
    )

    # Conversation Configuration
    session_idle_ttl_seconds: int | None = Field(
        default=None,
        gt=0,
        description="Drop conversations idle longer than this; unset keeps them forever",
    )

    # Application Configuration
    app_host: str = Field(default="0.0.0.0", description="Application host")
    app_port: int = Field(default=8000, description="Application port")
    app_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    app_reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()  # type: ignore[call-arg]


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for an entry point.

    Args:
        level: Logging level name
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for noisy in ("httpx", "googleapiclient", "telegram.ext"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
