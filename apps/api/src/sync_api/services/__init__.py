"""Service initialization and dependency injection."""

import logging
import threading
from typing import Any

from fastapi import Depends

from sync_api.config import Settings, get_settings
from sync_common.infra.cosmos.cosmos_connection import CosmosConnection
from sync_common.infra.http.clerk_client import ClerkApiClient, IdentityProviderClient
from sync_common.services.user_store import CosmosUserStore, InMemoryUserStore, UserStore
from sync_common.services.user_sync import UserSyncService
from sync_common.services.webhook_verifier import WebhookVerifier

logger = logging.getLogger(__name__)

# Service instances cache
_services_cache: dict[str, Any] = {}
_services_lock = threading.Lock()


def get_cosmos_connection() -> CosmosConnection:
    """Get the process-wide Cosmos DB connection handle.

    Returns:
        CosmosConnection instance (not yet connected on first call)
    """
    with _services_lock:
        if "cosmos_connection" not in _services_cache:
            _services_cache["cosmos_connection"] = CosmosConnection()
            logger.info("Initialized CosmosConnection")
        return _services_cache["cosmos_connection"]


def get_user_store(settings: Settings = Depends(get_settings)) -> UserStore:
    """Get the user record store for the configured backend.

    Args:
        settings: Application settings

    Returns:
        UserStore instance
    """
    if settings.user_store_backend == "memory":
        with _services_lock:
            if "user_store" not in _services_cache:
                _services_cache["user_store"] = InMemoryUserStore()
                logger.warning("Using in-memory user store; records are lost on restart")
            return _services_cache["user_store"]

    connection = get_cosmos_connection()
    with _services_lock:
        if "user_store" not in _services_cache:
            _services_cache["user_store"] = CosmosUserStore(connection)
            logger.info("Initialized CosmosUserStore")
        return _services_cache["user_store"]


def get_metadata_client(settings: Settings = Depends(get_settings)) -> IdentityProviderClient | None:
    """Get the Clerk API client used for metadata write-back.

    Args:
        settings: Application settings

    Returns:
        ClerkApiClient instance, or None when CLERK_SECRET_KEY is not set
    """
    if not settings.metadata_write_back_enabled:
        return None

    with _services_lock:
        if "metadata_client" not in _services_cache:
            _services_cache["metadata_client"] = ClerkApiClient(
                secret_key=settings.clerk_secret_key,
                api_url=settings.clerk_api_url,
                timeout=settings.clerk_timeout_seconds,
            )
            logger.info("Initialized ClerkApiClient")
        return _services_cache["metadata_client"]


def get_webhook_verifier(settings: Settings = Depends(get_settings)) -> WebhookVerifier:
    """Get the Svix webhook verifier.

    Args:
        settings: Application settings

    Returns:
        WebhookVerifier instance
    """
    with _services_lock:
        if "webhook_verifier" not in _services_cache:
            _services_cache["webhook_verifier"] = WebhookVerifier(settings.require_webhook_secret())
        return _services_cache["webhook_verifier"]


def get_user_sync_service(
    store: UserStore = Depends(get_user_store),
    metadata_client: IdentityProviderClient | None = Depends(get_metadata_client),
) -> UserSyncService:
    """Get the user sync service wired to the store and metadata client."""
    return UserSyncService(store=store, metadata_client=metadata_client)


def close_services() -> None:
    """Release cached services. Called once at shutdown."""
    with _services_lock:
        connection = _services_cache.pop("cosmos_connection", None)
        metadata_client = _services_cache.pop("metadata_client", None)
        _services_cache.clear()

    if connection is not None:
        connection.close()
    if metadata_client is not None:
        metadata_client.close()
