"""Webhook response models."""

from pydantic import BaseModel

from sync_common.models.results import SyncResult
from sync_common.models.user import UserRecord


class WebhookResponse(BaseModel):
    """Body returned to Clerk for every handled webhook."""

    message: str
    user: UserRecord | None = None
    warning: str | None = None

    @classmethod
    def from_result(cls, result: SyncResult) -> "WebhookResponse":
        return cls(message=result.message, user=result.user, warning=result.warning)

    def to_content(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
