"""Configuration settings for the record service client.

This module defines the configuration settings using Pydantic's
SettingsConfigDict to load environment variables from a .env file.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings class for the client."""

    # RECORD SERVICE CONFIG
    backend_url: str = "https://localhost:8080/api/excel"
    verify_ssl: bool = True
    timeout: Optional[float] = None  # No timeout unless configured

    # PAGINATION CONFIG
    page_size: int = Field(default=10, gt=0)

    # SEARCH CONFIG
    search_column: str = "ID"

    # CONCURRENCY CONFIG
    # Discard page responses that complete out of order. Disable to get
    # last-response-wins ordering.
    request_sequencing: bool = True

    model_config = SettingsConfigDict(
        env_prefix="SHEETSYNC_",
        env_file=[".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get the settings for the client."""
    logger.info("Loading config settings from the environment...")

    settings = Settings()

    logger.info(
        f"Record service at {settings.backend_url} "
        f"(page size {settings.page_size}, sequencing {settings.request_sequencing})"
    )

    return settings
