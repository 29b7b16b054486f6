"""Pytest configuration for common-py tests."""

import base64
import json
import os
from datetime import UTC, datetime
from typing import Any

os.environ.setdefault("ENV_FILE", os.path.join(os.path.dirname(__file__), ".env.test"))

import pytest
from svix.webhooks import Webhook

from sync_common.errors import RemoteCallFailedError
from sync_common.infra.http.clerk_client import IdentityProviderClient
from sync_common.services.user_store import InMemoryUserStore

WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"common-py-test-signing-secret-32").decode()


class RecordingMetadataClient(IdentityProviderClient):
    """Identity provider double that records write-back calls."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def update_public_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        self.calls.append((user_id, metadata))
        if self.fail:
            raise RemoteCallFailedError("Clerk returned 503")


def user_event(event_type: str, **data: Any) -> dict[str, Any]:
    """Build a Clerk webhook body."""
    return {"type": event_type, "object": "event", "data": data}


def sign(body: str, secret: str = WEBHOOK_SECRET, msg_id: str = "msg_test", timestamp: datetime | None = None) -> dict[str, str]:
    """Return Svix headers for ``body``."""
    timestamp = timestamp or datetime.now(tz=UTC)
    return {
        "svix-id": msg_id,
        "svix-timestamp": str(int(timestamp.timestamp())),
        "svix-signature": Webhook(secret).sign(msg_id, timestamp, body),
    }


@pytest.fixture
def alice_event() -> dict[str, Any]:
    return user_event(
        "user.created",
        id="u1",
        email_addresses=[{"id": "idn_1", "email_address": "a@x.com"}],
        username="alice",
        image_url="http://img/1",
        first_name="A",
        last_name="L",
    )


@pytest.fixture
def signed_body(alice_event: dict[str, Any]) -> tuple[str, dict[str, str]]:
    body = json.dumps(alice_event)
    return body, sign(body)


@pytest.fixture
def memory_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def metadata_client() -> RecordingMetadataClient:
    return RecordingMetadataClient()


@pytest.fixture
def failing_metadata_client() -> RecordingMetadataClient:
    return RecordingMetadataClient(fail=True)


@pytest.fixture
def make_event():
    return user_event


@pytest.fixture
def sign_headers():
    return sign


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET
