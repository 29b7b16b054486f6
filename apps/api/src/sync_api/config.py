"""Configuration management for the user sync API."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from sync_common.errors import ConfigurationError


def _get_env_file_path() -> str:
    """Get the path to the .env file.

    Checks for ENV_FILE environment variable first, then defaults to
    .env in the API project directory (apps/api/.env).

    Returns:
        Path to the .env file
    """
    # Check if ENV_FILE environment variable is set
    env_file = os.getenv("ENV_FILE")
    if env_file:
        return env_file

    # This file is in apps/api/src/sync_api/config.py
    # So we go up 3 levels to get to apps/api/
    current_file = Path(__file__)
    api_dir = current_file.parent.parent.parent
    default_env_file = api_dir / ".env"
    return str(default_env_file)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "clerk-user-sync"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "info"

    # API
    api_host: str = "localhost"
    api_port: int = 8000

    # Clerk webhook signing secret (whsec_...)
    webhook_secret: str | None = None

    # Clerk Backend API, used for metadata write-back
    clerk_secret_key: str | None = None
    clerk_api_url: str = "https://api.clerk.com/v1"
    clerk_timeout_seconds: float = 10.0

    # Record store
    user_store_backend: Literal["cosmos", "memory"] = "cosmos"

    model_config = SettingsConfigDict(
        env_file=_get_env_file_path(),
        case_sensitive=False,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def metadata_write_back_enabled(self) -> bool:
        return bool(self.clerk_secret_key)

    def require_webhook_secret(self) -> str:
        """Return the webhook secret or fail before any request is served."""
        if not self.webhook_secret:
            raise ConfigurationError("Please add WEBHOOK_SECRET from Clerk Dashboard to .env or .env.local")
        return self.webhook_secret


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
