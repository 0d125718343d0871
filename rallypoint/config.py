"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./rallypoint.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone (or UTC+HH:MM offset) used for stored timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    push_gateway_url: str = Field(
        default="https://exp.host/--/api/v2/push/send",
        description="Endpoint of the push gateway that accepts message batches",
        min_length=1,
    )
    push_access_token: str | None = Field(
        default=None,
        description="Optional bearer token sent to the push gateway",
    )
    push_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for a single gateway round trip",
        gt=0,
    )
    push_batch_size: int = Field(
        default=100,
        description="Maximum number of messages sent in one gateway call",
        gt=0,
        le=100,
    )
    push_max_attempts: int = Field(
        default=5,
        description="Dispatch attempts before a pending notification is marked failed",
        gt=0,
    )
    sweep_interval_seconds: int = Field(
        default=300,
        description="Seconds between scheduled sweeps of pending notifications",
        gt=0,
    )
    sweep_batch_size: int = Field(
        default=200,
        description="Maximum number of pending notifications handled per sweep",
        gt=0,
    )
    scheduler_enabled: bool = Field(
        default=True,
        description="Run the periodic sweep inside the API process",
    )

    @model_validator(mode="after")
    def _validate_gateway_url(self) -> "Settings":
        if not self.push_gateway_url.startswith(("http://", "https://")):
            raise ValueError("PUSH_GATEWAY_URL must be an http(s) URL")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
