"""Cosmos DB infrastructure."""

from sync_common.infra.cosmos.cosmos_connection import COSMOS_SYSTEM_FIELDS, CosmosConnection, strip_system_fields

__all__ = ["COSMOS_SYSTEM_FIELDS", "CosmosConnection", "strip_system_fields"]
