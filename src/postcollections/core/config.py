"""Settings for postcollections.

Values come from ``POSTCOLLECTIONS_*`` environment variables or a .env file
and are read once per process through ``get_settings``.
"""

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class Settings(BaseSettings):
    """Runtime configuration for the collection service, storage and CLI."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTCOLLECTIONS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "postcollections"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/collections.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_echo: bool = False

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Collection Settings
    check_slug_on_create: bool = Field(
        default=False,
        description="Ask the slug uniqueness checker before creating a collection",
    )
    default_slug_fallback: str = Field(
        default="collection",
        description="Slug used when a title produces no usable slug characters",
    )
    filter_cache_size: int = Field(
        default=256,
        ge=0,
        description="Parsed filter expressions kept per evaluator",
    )

    @field_validator("default_slug_fallback")
    @classmethod
    def validate_slug_fallback(cls, v: str) -> str:
        """The fallback is stored as a slug, so it must already be one."""
        if not SLUG_PATTERN.match(v):
            raise ValueError("default_slug_fallback must be lowercase words joined by hyphens")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
