"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Engine configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./sif_notifications.db",
        description="Database connection URL used by SQLAlchemy for the persistence adapter",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used for local-date grouping and quiet hours",
    )
    notifications_page_size: int = Field(
        default=20,
        description="Number of notifications requested per page from persistence",
        gt=0,
    )
    settings_backup_limit: int = Field(
        default=5,
        description="Maximum number of settings snapshots retained per user",
        gt=0,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
