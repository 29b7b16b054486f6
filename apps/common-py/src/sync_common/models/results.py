"""Outcome types returned by the record store and the sync handler."""

from enum import StrEnum

from pydantic import BaseModel

from sync_common.models.user import UserRecord


class StoreResultKind(StrEnum):
    """What a store operation did."""

    CREATED = "created"
    FOUND = "found"
    UPDATED = "updated"
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    DUPLICATE_KEY = "duplicate_key"


class StoreResult(BaseModel):
    """Result of a record store operation."""

    kind: StoreResultKind
    record: UserRecord | None = None

    @property
    def found(self) -> bool:
        """Whether a record is attached; mainly used by tests."""
        return self.record is not None

    @classmethod
    def not_found(cls) -> "StoreResult":
        return cls(kind=StoreResultKind.NOT_FOUND)

    @classmethod
    def duplicate_key(cls) -> "StoreResult":
        return cls(kind=StoreResultKind.DUPLICATE_KEY)


class SyncResult(BaseModel):
    """Response-level outcome of handling one webhook event."""

    status_code: int
    message: str
    user: UserRecord | None = None
    warning: str | None = None
