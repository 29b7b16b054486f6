"""Infrastructure layer for external communication."""

from sync_common.infra.cosmos.cosmos_connection import CosmosConnection
from sync_common.infra.http.clerk_client import ClerkApiClient, IdentityProviderClient

__all__ = [
    "ClerkApiClient",
    "CosmosConnection",
    "IdentityProviderClient",
]
