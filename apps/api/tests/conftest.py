"""Pytest configuration and fixtures."""

import base64
import json
import os
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock

WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"api-test-webhook-signing-secret!").decode()

# Settings are read from the environment when the app is imported
os.environ["ENV_FILE"] = os.path.join(os.path.dirname(__file__), ".env.test")
os.environ["WEBHOOK_SECRET"] = WEBHOOK_SECRET
os.environ["USER_STORE_BACKEND"] = "memory"
os.environ.pop("CLERK_SECRET_KEY", None)

import pytest
from fastapi.testclient import TestClient
from svix.webhooks import Webhook

from sync_api.main import app
from sync_api.services import get_metadata_client, get_user_store
from sync_common.errors import RemoteCallFailedError
from sync_common.infra.http.clerk_client import IdentityProviderClient
from sync_common.services.user_store import InMemoryUserStore


class RecordingMetadataClient(IdentityProviderClient):
    """Identity provider double that records write-back calls."""

    def __init__(self) -> None:
        self.fail = False
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def update_public_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        self.calls.append((user_id, metadata))
        if self.fail:
            raise RemoteCallFailedError("Clerk returned 503")


@pytest.fixture
def memory_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def user_store(memory_store: InMemoryUserStore) -> Mock:
    """In-memory store wrapped so tests can assert on store access."""
    return Mock(wraps=memory_store)


@pytest.fixture
def metadata_client() -> RecordingMetadataClient:
    return RecordingMetadataClient()


@pytest.fixture
def client(user_store: Mock, metadata_client: RecordingMetadataClient) -> Iterator[TestClient]:
    """Create a FastAPI test client wired to test doubles."""
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_metadata_client] = lambda: metadata_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def webhook_url() -> str:
    return "/api/webhooks/clerk"


@pytest.fixture
def signed_request():
    """Return a function building ``(body, headers)`` for a Clerk event."""

    def build(event: dict[str, Any], secret: str = WEBHOOK_SECRET, msg_id: str = "msg_test") -> tuple[str, dict[str, str]]:
        body = json.dumps(event)
        timestamp = datetime.now(tz=UTC)
        headers = {
            "svix-id": msg_id,
            "svix-timestamp": str(int(timestamp.timestamp())),
            "svix-signature": Webhook(secret).sign(msg_id, timestamp, body),
            "content-type": "application/json",
        }
        return body, headers

    return build


@pytest.fixture
def alice_event() -> dict[str, Any]:
    return {
        "type": "user.created",
        "object": "event",
        "data": {
            "id": "u1",
            "email_addresses": [{"email_address": "a@x.com"}],
            "username": "alice",
            "image_url": "http://img/1",
            "first_name": "A",
            "last_name": "L",
        },
    }
