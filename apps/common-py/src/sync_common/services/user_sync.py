"""Service layer: applies verified Clerk user events to the record store."""

import logging
from collections.abc import Callable

from pydantic import ValidationError

from sync_common.errors import RemoteCallFailedError, StoreUnavailableError
from sync_common.infra.http.clerk_client import IdentityProviderClient
from sync_common.models.results import StoreResult, StoreResultKind, SyncResult
from sync_common.models.user import ClerkDeletedObject, ClerkUserPayload, UserRecord, WebhookEvent
from sync_common.services.field_mapper import map_user_payload
from sync_common.services.user_store import UserStore

logger = logging.getLogger(__name__)


class UserSyncService:
    """Service layer: synchronizes local user records with Clerk events.

    Each event results in exactly one store mutation at most. Every handler
    is safe to repeat with identical input, since Clerk redelivers events
    that did not get a 2xx response.
    """

    def __init__(self, store: UserStore, metadata_client: IdentityProviderClient | None = None) -> None:
        """Initialize the sync service.

        Args:
            store: User record store
            metadata_client: Client used to write the local id back to Clerk.
                If None, write-back is skipped.
        """
        self.store = store
        self.metadata_client = metadata_client
        self._handlers: dict[str, Callable[[WebhookEvent], SyncResult]] = {
            WebhookEvent.USER_CREATED: self._handle_created,
            WebhookEvent.USER_UPDATED: self._handle_updated,
            WebhookEvent.USER_DELETED: self._handle_deleted,
        }

    def handle(self, event: WebhookEvent) -> SyncResult:
        """Apply one verified event.

        Args:
            event: Verified webhook event

        Returns:
            Outcome with the HTTP status to answer with

        Raises:
            StoreUnavailableError: If the store operation fails
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.info("Ignoring unhandled event type %s", event.type)
            return SyncResult(status_code=400, message=f"Unhandled event type {event.type}")

        try:
            return handler(event)
        except ValidationError as e:
            logger.warning("Invalid %s payload: %s", event.type, e)
            return SyncResult(status_code=400, message="Invalid event payload")

    def _handle_created(self, event: WebhookEvent) -> SyncResult:
        record = map_user_payload(ClerkUserPayload.model_validate(event.data))

        result = self.store.create(record)
        if result.kind == StoreResultKind.DUPLICATE_KEY:
            # Redelivered user.created: keep the existing id, refresh the fields
            logger.info("User %s already exists, updating it instead", record.clerk_id)
            result = self.store.find_and_update(record.clerk_id, record, upsert=True)
        stored = self._require_record(result, record.clerk_id)

        warning = self._write_back(stored)
        return SyncResult(status_code=201, message="New user created", user=stored, warning=warning)

    def _handle_updated(self, event: WebhookEvent) -> SyncResult:
        record = map_user_payload(ClerkUserPayload.model_validate(event.data))

        result = self.store.find_and_update(record.clerk_id, record, upsert=True)
        stored = self._require_record(result, record.clerk_id)
        if result.kind == StoreResultKind.CREATED:
            logger.info("User %s did not exist before update, created it", record.clerk_id)

        warning = self._write_back(stored)
        return SyncResult(status_code=200, message="User updated", user=stored, warning=warning)

    def _handle_deleted(self, event: WebhookEvent) -> SyncResult:
        deleted = ClerkDeletedObject.model_validate(event.data)

        result = self.store.find_and_delete(deleted.id)
        if result.kind == StoreResultKind.NOT_FOUND:
            return SyncResult(status_code=404, message="User not found")
        return SyncResult(status_code=200, message="User deleted", user=result.record)

    @staticmethod
    def _require_record(result: StoreResult, clerk_id: str) -> UserRecord:
        """Return the stored record, or fail so the event is redelivered."""
        if result.record is None:
            logger.error("Store returned %s without a record for user %s", result.kind, clerk_id)
            raise StoreUnavailableError(f"User {clerk_id} was not written")
        return result.record

    def _write_back(self, record: UserRecord) -> str | None:
        """Store the local id in the Clerk user's public metadata.

        Failures are logged and returned as a warning; the store mutation
        has already happened and stays.
        """
        if self.metadata_client is None:
            return None
        try:
            self.metadata_client.update_public_metadata(record.clerk_id, {"userId": record.id})
        except RemoteCallFailedError as e:
            logger.warning("Metadata write-back failed for user %s: %s", record.clerk_id, e)
            return "Metadata write-back failed"
        return None
