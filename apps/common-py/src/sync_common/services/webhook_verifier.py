"""Svix signature verification for Clerk webhooks."""

import logging
from collections.abc import Mapping

from pydantic import ValidationError
from svix.webhooks import Webhook, WebhookVerificationError

from sync_common.errors import ConfigurationError, InvalidSignatureError, MissingHeadersError
from sync_common.models.user import WebhookEvent

logger = logging.getLogger(__name__)

SVIX_ID_HEADER = "svix-id"
SVIX_TIMESTAMP_HEADER = "svix-timestamp"
SVIX_SIGNATURE_HEADER = "svix-signature"
REQUIRED_HEADERS = (SVIX_ID_HEADER, SVIX_TIMESTAMP_HEADER, SVIX_SIGNATURE_HEADER)
SECRET_PREFIX = "whsec_"


class WebhookVerifier:
    """Verifies the Svix signature of an inbound webhook and parses the event."""

    def __init__(self, secret: str | None) -> None:
        """Initialize the verifier.

        Args:
            secret: Signing secret from the Clerk dashboard (whsec_...)

        Raises:
            ConfigurationError: If the secret is missing or malformed
        """
        if not secret:
            raise ConfigurationError("Please add WEBHOOK_SECRET from Clerk Dashboard to .env")
        if not secret.removeprefix(SECRET_PREFIX).strip("=").strip():
            raise ConfigurationError("WEBHOOK_SECRET has an empty signing key")
        try:
            self._webhook = Webhook(secret)
        except ValueError as e:
            raise ConfigurationError("WEBHOOK_SECRET is not a valid signing secret") from e

    def verify(self, body: bytes | str, headers: Mapping[str, str | None]) -> WebhookEvent:
        """Verify ``body`` against the Svix headers.

        Args:
            body: Raw request body, exactly as received
            headers: Request headers; only the three Svix headers are read

        Returns:
            The parsed event

        Raises:
            MissingHeadersError: If any Svix header is absent
            InvalidSignatureError: If verification or parsing fails
        """
        svix_headers = {name: headers.get(name) for name in REQUIRED_HEADERS}
        missing = [name for name, value in svix_headers.items() if not value]
        if missing:
            logger.warning("Rejected webhook without headers: %s", ", ".join(missing))
            raise MissingHeadersError()

        payload = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        try:
            verified = self._webhook.verify(payload, svix_headers)
            return WebhookEvent.model_validate(verified)
        except (WebhookVerificationError, ValidationError, ValueError) as e:
            logger.warning("Error verifying webhook %s: %s", svix_headers[SVIX_ID_HEADER], e)
            raise InvalidSignatureError() from e
