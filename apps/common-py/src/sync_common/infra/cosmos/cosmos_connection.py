"""Process-wide Cosmos DB connection handle."""

import logging
import threading
from contextlib import ExitStack
from typing import Any

from azure.core.exceptions import AzureError
from azure.cosmos import ContainerProxy, CosmosClient, PartitionKey
from azure.identity import DefaultAzureCredential

from sync_common.config.store_config import StoreConfig
from sync_common.errors import ConfigurationError, StoreUnavailableError

logger = logging.getLogger(__name__)

CLERK_ID_PATH = "/clerkId"
COSMOS_SYSTEM_FIELDS = frozenset({"_rid", "_self", "_etag", "_attachments", "_ts"})


def strip_system_fields(item: dict[str, Any]) -> dict[str, Any]:
    """Remove Cosmos DB system fields from a stored item."""
    return {k: v for k, v in item.items() if k not in COSMOS_SYSTEM_FIELDS}


class CosmosConnection:
    """Infrastructure layer: lazily connects to the users container.

    The client, database and container are created on first use and reused
    until :meth:`close` is called at shutdown. Initialization is guarded by a
    lock so concurrent first callers share a single client.
    """

    def __init__(self, config: StoreConfig | None = None) -> None:
        """Initialize the connection handle without connecting.

        Args:
            config: Store configuration. If None, will load from environment.
        """
        if config is None:
            from sync_common.config.store_config import get_store_config

            config = get_store_config()

        if not (config.azure_cosmosdb_connection_string or config.azure_cosmosdb_endpoint):
            raise ConfigurationError("AZURE_COSMOSDB_CONNECTION_STRING or AZURE_COSMOSDB_ENDPOINT is required")

        self.config = config
        self._lock = threading.Lock()
        self._stack = ExitStack()
        self._container: ContainerProxy | None = None

    @property
    def is_connected(self) -> bool:
        """Whether the container has been opened; used by tests and diagnostics."""
        return self._container is not None

    def get_container(self) -> ContainerProxy:
        """Return the users container, connecting on first call.

        Raises:
            StoreUnavailableError: If the account cannot be reached
        """
        container = self._container
        if container is not None:
            return container

        with self._lock:
            if self._container is None:
                self._container = self._connect()
            return self._container

    def _create_client(self) -> CosmosClient:
        config = self.config
        if config.azure_cosmosdb_connection_string:
            return CosmosClient.from_connection_string(config.azure_cosmosdb_connection_string)
        if config.azure_cosmosdb_key:
            # Use key-based authentication
            return CosmosClient(url=config.azure_cosmosdb_endpoint, credential=config.azure_cosmosdb_key)
        # Use managed identity
        return CosmosClient(url=config.azure_cosmosdb_endpoint, credential=DefaultAzureCredential())

    def _connect(self) -> ContainerProxy:
        config = self.config
        try:
            client = self._stack.enter_context(self._create_client())
            database = client.create_database_if_not_exists(id=config.cosmos_db)

            options: dict[str, Any] = {
                "id": config.cosmos_users_container,
                "partition_key": PartitionKey(path=CLERK_ID_PATH),
                "unique_key_policy": {"uniqueKeys": [{"paths": [CLERK_ID_PATH]}]},
            }
            # Emulator typically requires provisioned throughput
            if config.is_emulator:
                options["offer_throughput"] = 400
            container = database.create_container_if_not_exists(**options)
        except AzureError as e:
            logger.error("Failed to connect to Cosmos DB: %s", e)
            self._stack.close()
            self._stack = ExitStack()
            raise StoreUnavailableError(f"Cosmos DB unavailable: {e}") from e

        logger.info(
            "Connected to Cosmos DB database '%s', container '%s' (partition key '%s')",
            config.cosmos_db,
            config.cosmos_users_container,
            CLERK_ID_PATH,
        )
        return container

    def close(self) -> None:
        """Release the client. Only called at process shutdown."""
        with self._lock:
            if self._container is not None:
                logger.info("Closing Cosmos DB connection")
            self._container = None
            self._stack.close()
            self._stack = ExitStack()
