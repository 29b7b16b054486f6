"""Error taxonomy for user synchronization."""


class UserSyncError(Exception):
    """Base error carrying an HTTP status and a client-safe message."""

    status_code: int = 500
    message: str = "Error occurred"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class ConfigurationError(UserSyncError):
    """Required configuration is missing or invalid."""

    message = "Service is not configured"


class MissingHeadersError(UserSyncError):
    """One or more Svix headers were not sent."""

    status_code = 400
    message = "Error occurred -- no svix headers"


class InvalidSignatureError(UserSyncError):
    """Webhook payload failed verification."""

    status_code = 400
    message = "Error occurred -- invalid signature"


class StoreUnavailableError(UserSyncError):
    """The record store could not complete an operation."""

    message = "Error occurred"


class RemoteCallFailedError(UserSyncError):
    """A call to the identity provider API failed."""

    status_code = 502
    message = "Identity provider call failed"
