"""User record store with Cosmos DB and in-memory implementations."""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any

from azure.core import MatchConditions
from azure.core.exceptions import AzureError
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from sync_common.errors import StoreUnavailableError
from sync_common.infra.cosmos.cosmos_connection import CosmosConnection, strip_system_fields
from sync_common.models.results import StoreResult, StoreResultKind
from sync_common.models.user import UserRecord

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class UserStore(ABC):
    """Abstract interface for the user record store.

    Expected absences are reported through :class:`StoreResult` kinds.
    Operational failures raise :class:`StoreUnavailableError`.
    """

    @abstractmethod
    def create(self, record: UserRecord) -> StoreResult:
        """Insert a new record with a generated id.

        Returns:
            ``CREATED`` with the stored record, or ``DUPLICATE_KEY`` if the
            Clerk ID is already present
        """

    @abstractmethod
    def find(self, clerk_id: str) -> StoreResult:
        """Look up a record by Clerk ID (``FOUND`` or ``NOT_FOUND``)."""

    @abstractmethod
    def find_and_update(self, clerk_id: str, record: UserRecord, upsert: bool = False) -> StoreResult:
        """Overwrite the record for ``clerk_id`` with ``record``.

        The stored id and Clerk ID are preserved, every other field is
        replaced.

        Args:
            clerk_id: Clerk user ID to match
            record: New field values
            upsert: Create the record when it does not exist

        Returns:
            ``UPDATED``, ``CREATED`` (upsert) or ``NOT_FOUND``
        """

    @abstractmethod
    def find_and_delete(self, clerk_id: str) -> StoreResult:
        """Remove the record for ``clerk_id`` (``DELETED`` or ``NOT_FOUND``)."""


class CosmosUserStore(UserStore):
    """Cosmos DB implementation of UserStore.

    Items are partitioned by ``/clerkId`` so every operation is a
    single-partition call.
    """

    QUERY_BY_CLERK_ID = "SELECT * FROM c WHERE c.clerkId = @clerkId"

    def __init__(self, connection: CosmosConnection) -> None:
        """Initialize Cosmos DB user store.

        Args:
            connection: Shared connection handle
        """
        self.connection = connection

    def _query_one(self, clerk_id: str) -> dict[str, Any] | None:
        container = self.connection.get_container()
        items = list(
            container.query_items(
                query=self.QUERY_BY_CLERK_ID,
                parameters=[{"name": "@clerkId", "value": clerk_id}],
                partition_key=clerk_id,
            )
        )
        if len(items) > 1:
            logger.warning("Found %d records for clerkId %s, using the first", len(items), clerk_id)
        return items[0] if items else None

    def _read(self, clerk_id: str) -> dict[str, Any] | None:
        try:
            return self._query_one(clerk_id)
        except AzureError as e:
            logger.error("Failed to read user %s: %s", clerk_id, e)
            raise StoreUnavailableError(f"Failed to read user {clerk_id}") from e

    def create(self, record: UserRecord) -> StoreResult:
        body = record.model_copy(update={"id": _new_id()}).to_document()
        try:
            created = self.connection.get_container().create_item(body=body)
        except CosmosResourceExistsError:
            logger.info("User with clerkId %s already exists", record.clerk_id)
            return StoreResult.duplicate_key()
        except AzureError as e:
            logger.error("Failed to create user %s: %s", record.clerk_id, e)
            raise StoreUnavailableError(f"Failed to create user {record.clerk_id}") from e

        logger.info("Created user %s with id %s", record.clerk_id, created["id"])
        return StoreResult(kind=StoreResultKind.CREATED, record=UserRecord.model_validate(strip_system_fields(created)))

    def find(self, clerk_id: str) -> StoreResult:
        item = self._read(clerk_id)
        if item is None:
            return StoreResult.not_found()
        return StoreResult(kind=StoreResultKind.FOUND, record=UserRecord.model_validate(strip_system_fields(item)))

    def find_and_update(self, clerk_id: str, record: UserRecord, upsert: bool = False) -> StoreResult:
        existing = self._read(clerk_id)
        if existing is None:
            if not upsert:
                logger.info("User %s not found for update", clerk_id)
                return StoreResult.not_found()
            logger.info("User %s not found for update, creating it", clerk_id)
            created = self.create(record.model_copy(update={"clerk_id": clerk_id}))
            if created.kind != StoreResultKind.DUPLICATE_KEY:
                return created
            # Lost the insert race to a concurrent create; overwrite that record instead
            existing = self._read(clerk_id)
            if existing is None:
                raise StoreUnavailableError(f"User {clerk_id} was deleted concurrently")

        return self._replace(clerk_id, existing, record)

    def _replace(self, clerk_id: str, existing: dict[str, Any], record: UserRecord) -> StoreResult:
        try:
            body = record.model_copy(update={"id": existing["id"], "clerk_id": clerk_id}).to_document()
            # Replace only if the item is unchanged since it was read
            updated = self.connection.get_container().replace_item(
                item=existing["id"],
                body=body,
                etag=existing.get("_etag"),
                match_condition=MatchConditions.IfNotModified,
            )
        except CosmosAccessConditionFailedError as e:
            logger.error("User %s was modified concurrently: %s", clerk_id, e)
            raise StoreUnavailableError(f"User {clerk_id} was modified concurrently") from e
        except AzureError as e:
            logger.error("Failed to update user %s: %s", clerk_id, e)
            raise StoreUnavailableError(f"Failed to update user {clerk_id}") from e

        logger.info("Updated user %s", clerk_id)
        return StoreResult(kind=StoreResultKind.UPDATED, record=UserRecord.model_validate(strip_system_fields(updated)))

    def find_and_delete(self, clerk_id: str) -> StoreResult:
        try:
            existing = self._query_one(clerk_id)
            if existing is None:
                logger.info("User %s not found for deletion", clerk_id)
                return StoreResult.not_found()
            self.connection.get_container().delete_item(item=existing["id"], partition_key=clerk_id)
        except CosmosResourceNotFoundError:
            logger.info("User %s was already deleted", clerk_id)
            return StoreResult.not_found()
        except AzureError as e:
            logger.error("Failed to delete user %s: %s", clerk_id, e)
            raise StoreUnavailableError(f"Failed to delete user {clerk_id}") from e

        logger.info("Deleted user %s", clerk_id)
        return StoreResult(kind=StoreResultKind.DELETED, record=UserRecord.model_validate(strip_system_fields(existing)))


class InMemoryUserStore(UserStore):
    """In-memory implementation of UserStore for local development and tests."""

    def __init__(self) -> None:
        self._records: dict[str, UserRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of stored records; used by tests."""
        return len(self._records)

    def create(self, record: UserRecord) -> StoreResult:
        with self._lock:
            if record.clerk_id in self._records:
                return StoreResult.duplicate_key()
            stored = record.model_copy(update={"id": _new_id()})
            self._records[record.clerk_id] = stored
        return StoreResult(kind=StoreResultKind.CREATED, record=stored)

    def find(self, clerk_id: str) -> StoreResult:
        record = self._records.get(clerk_id)
        if record is None:
            return StoreResult.not_found()
        return StoreResult(kind=StoreResultKind.FOUND, record=record)

    def find_and_update(self, clerk_id: str, record: UserRecord, upsert: bool = False) -> StoreResult:
        with self._lock:
            existing = self._records.get(clerk_id)
            if existing is None:
                if not upsert:
                    return StoreResult.not_found()
                stored = record.model_copy(update={"id": _new_id(), "clerk_id": clerk_id})
                kind = StoreResultKind.CREATED
            else:
                stored = record.model_copy(update={"id": existing.id, "clerk_id": clerk_id})
                kind = StoreResultKind.UPDATED
            self._records[clerk_id] = stored
        return StoreResult(kind=kind, record=stored)

    def find_and_delete(self, clerk_id: str) -> StoreResult:
        with self._lock:
            record = self._records.pop(clerk_id, None)
        if record is None:
            return StoreResult.not_found()
        return StoreResult(kind=StoreResultKind.DELETED, record=record)
