"""HTTP clients for external APIs."""

from sync_common.infra.http.clerk_client import ClerkApiClient, IdentityProviderClient

__all__ = ["ClerkApiClient", "IdentityProviderClient"]
