"""Tests for the Clerk Backend API client."""

from unittest.mock import MagicMock

import pytest
import requests

from sync_common.errors import ConfigurationError, RemoteCallFailedError
from sync_common.infra.http.clerk_client import ClerkApiClient


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.mark.unit
def test_requires_secret_key() -> None:
    with pytest.raises(ConfigurationError):
        ClerkApiClient(secret_key="")


@pytest.mark.unit
def test_update_public_metadata(session: MagicMock) -> None:
    client = ClerkApiClient(secret_key="sk_test_123", api_url="https://api.clerk.test/v1/", timeout=3, session=session)

    client.update_public_metadata("u1", {"userId": "doc-1"})

    session.patch.assert_called_once_with(
        "https://api.clerk.test/v1/users/u1/metadata",
        json={"public_metadata": {"userId": "doc-1"}},
        timeout=3,
    )
    session.patch.return_value.raise_for_status.assert_called_once()
    assert session.headers["Authorization"] == "Bearer sk_test_123"


@pytest.mark.unit
def test_http_error_is_remote_call_failure(session: MagicMock) -> None:
    session.patch.return_value.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
    client = ClerkApiClient(secret_key="sk_test_123", session=session)

    with pytest.raises(RemoteCallFailedError):
        client.update_public_metadata("u1", {"userId": "doc-1"})


@pytest.mark.unit
def test_timeout_is_remote_call_failure(session: MagicMock) -> None:
    session.patch.side_effect = requests.Timeout("read timed out")
    client = ClerkApiClient(secret_key="sk_test_123", session=session)

    with pytest.raises(RemoteCallFailedError):
        client.update_public_metadata("u1", {"userId": "doc-1"})
