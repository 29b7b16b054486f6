"""Common models package."""

from sync_common.models.results import StoreResult, StoreResultKind, SyncResult
from sync_common.models.user import (
    ClerkDeletedObject,
    ClerkUserPayload,
    EmailAddress,
    UserRecord,
    WebhookEvent,
)

__all__ = [
    "ClerkDeletedObject",
    "ClerkUserPayload",
    "EmailAddress",
    "StoreResult",
    "StoreResultKind",
    "SyncResult",
    "UserRecord",
    "WebhookEvent",
]
