"""Configuration management for the user record store."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_env_file_path() -> str:
    """Get the path to the .env file.

    Checks for ENV_FILE environment variable first, then defaults to
    .env in the common-py project directory (apps/common-py/.env).

    Returns:
        Path to the .env file
    """
    env_file = os.getenv("ENV_FILE")
    if env_file:
        return env_file

    # This file is in apps/common-py/src/sync_common/config/store_config.py
    current_file = Path(__file__)
    common_py_dir = current_file.parent.parent.parent.parent
    return str(common_py_dir / ".env")


class StoreConfig(BaseSettings):
    """Document store settings from environment variables."""

    # Cosmos DB
    azure_cosmosdb_connection_string: str | None = None
    azure_cosmosdb_endpoint: str | None = None
    azure_cosmosdb_key: str | None = None
    cosmos_db: str = "usersync"
    cosmos_users_container: str = "users"

    model_config = SettingsConfigDict(
        env_file=_get_env_file_path(),
        case_sensitive=False,
        env_file_encoding="utf-8",
        env_prefix="",
        extra="ignore",
    )

    @property
    def is_emulator(self) -> bool:
        """Whether the configured account is the local Cosmos DB emulator."""
        target = self.azure_cosmosdb_endpoint or self.azure_cosmosdb_connection_string or ""
        return "localhost" in target.lower() or "127.0.0.1" in target


def get_store_config() -> StoreConfig:
    """Get record store configuration.

    Returns:
        StoreConfig instance
    """
    return StoreConfig()
