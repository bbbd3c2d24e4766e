"""
Store factory.

Chooses the store backend from the configured url scheme and wraps it with
the retry policy.
"""

from typing import Optional

from ..audit.logger import CatalogSyncLogger
from ..config.models import RetryConfig, StoreConfig
from ..exceptions import ConfigurationError
from .base import CatalogStore
from .memory_store import InMemoryCatalogStore
from .retrying_store import RetryingCatalogStore
from .sqlite_store import SqliteCatalogStore


def create_backend(
    store_config: StoreConfig, logger: Optional[CatalogSyncLogger] = None
) -> CatalogStore:
    """
    Create the raw backend for a store configuration.

    Args:
        store_config: Store configuration
        logger: Logger instance

    Returns:
        Store backend matching the url scheme
    """
    url = store_config.url

    if url.startswith(("mongodb://", "mongodb+srv://")):
        # Imported lazily so sqlite and memory runs do not touch the driver
        from .mongo_store import MongoCatalogStore

        return MongoCatalogStore(
            url,
            database_name=store_config.database_name,
            collection_name=store_config.collection_name,
            server_selection_timeout_ms=store_config.server_selection_timeout_ms,
            logger=logger,
        )

    if url.startswith("sqlite:///"):
        db_path = url[len("sqlite:///"):]
        if not db_path:
            raise ConfigurationError(f"Missing database path in store url: {url}")
        return SqliteCatalogStore(
            db_path, table_name=store_config.collection_name.lower(), logger=logger
        )

    if url.startswith("memory://"):
        return InMemoryCatalogStore()

    raise ConfigurationError(f"Unsupported store url: {url}")


def create_store(
    store_config: StoreConfig,
    retry_config: Optional[RetryConfig] = None,
    logger: Optional[CatalogSyncLogger] = None,
) -> CatalogStore:
    """Create the configured store wrapped with the retry policy."""
    backend = create_backend(store_config, logger)
    return RetryingCatalogStore(backend, retry_config or RetryConfig(), logger)
