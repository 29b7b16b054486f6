"""Clerk Backend API client used for metadata write-back."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import requests

from sync_common.errors import ConfigurationError, RemoteCallFailedError

logger = logging.getLogger(__name__)

CLERK_API_URL = "https://api.clerk.com/v1"


class IdentityProviderClient(ABC):
    """Abstract interface for writing to the identity provider."""

    @abstractmethod
    def update_public_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        """Merge ``metadata`` into the user's public metadata.

        Raises:
            RemoteCallFailedError: If the provider rejects or does not answer the call
        """


class ClerkApiClient(IdentityProviderClient):
    """Infrastructure layer: REST client for the Clerk Backend API."""

    def __init__(
        self,
        secret_key: str,
        api_url: str = CLERK_API_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize Clerk client.

        Args:
            secret_key: Clerk secret key (sk_...)
            api_url: Base URL of the Backend API
            timeout: Per-request timeout in seconds
            session: Optional requests session to reuse
        """
        if not secret_key:
            raise ConfigurationError("CLERK_SECRET_KEY is required")

        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {secret_key}",
                "Content-Type": "application/json",
            }
        )

    def _get_metadata_url(self, user_id: str) -> str:
        return f"{self._api_url}/users/{user_id}/metadata"

    def update_public_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        url = self._get_metadata_url(user_id)
        try:
            response = self._session.patch(url, json={"public_metadata": metadata}, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to update Clerk metadata for user %s: %s", user_id, e)
            raise RemoteCallFailedError(f"Clerk metadata update failed for user {user_id}: {e}") from e

        logger.info("Updated Clerk public metadata for user %s", user_id)

    def close(self) -> None:
        self._session.close()
