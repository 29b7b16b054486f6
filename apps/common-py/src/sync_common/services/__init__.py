"""Common services package."""

from sync_common.services.field_mapper import map_user_payload
from sync_common.services.user_store import CosmosUserStore, InMemoryUserStore, UserStore
from sync_common.services.user_sync import UserSyncService
from sync_common.services.webhook_verifier import WebhookVerifier

__all__ = [
    "CosmosUserStore",
    "InMemoryUserStore",
    "UserStore",
    "UserSyncService",
    "WebhookVerifier",
    "map_user_payload",
]
