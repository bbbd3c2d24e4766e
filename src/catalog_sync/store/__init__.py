"""
Store module for the catalog sync system.

This module provides the abstract product store, its backends and the
factory that picks a backend from configuration.
"""

from .base import CatalogStore, DeleteResult, UpsertOperation, UpsertResult
from .memory_store import InMemoryCatalogStore
from .retrying_store import RetryingCatalogStore
from .sqlite_store import SqliteCatalogStore
from .store_factory import create_store

__all__ = [
    "CatalogStore",
    "DeleteResult",
    "InMemoryCatalogStore",
    "RetryingCatalogStore",
    "SqliteCatalogStore",
    "UpsertOperation",
    "UpsertResult",
    "create_store",
]
