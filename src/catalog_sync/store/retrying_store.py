"""
Store wrapper that applies the retry policy to every batch call.
"""

from typing import Collection, Iterable, List, Optional, Sequence

from ..audit.logger import CatalogSyncLogger
from ..catalog.record import ProductRecord
from ..config.models import RetryConfig
from ..utils import retry_with_logging
from .base import CatalogStore, DeleteResult, UpsertOperation, UpsertResult


class RetryingCatalogStore(CatalogStore):
    """Delegates to another store, retrying batch calls per RetryConfig."""

    def __init__(
        self,
        store: CatalogStore,
        retry_config: RetryConfig,
        logger: Optional[CatalogSyncLogger] = None,
    ):
        self.store = store
        self.retry_config = retry_config
        self.logger = logger or CatalogSyncLogger()
        self._retry = retry_with_logging(retry_config, self.logger)

    def batch_upsert(self, operations: Sequence[UpsertOperation]) -> UpsertResult:
        return self._retry(self.store.batch_upsert)(operations)

    def range_scan_identities(
        self, greater_than: Optional[str], limit: int
    ) -> List[str]:
        return self._retry(self.store.range_scan_identities)(greater_than, limit)

    def batch_delete(self, identities: Collection[str]) -> DeleteResult:
        return self._retry(self.store.batch_delete)(identities)

    def insert_records(self, records: Iterable[ProductRecord]) -> int:
        # Materialize so a retried attempt sees the same records
        return self._retry(self.store.insert_records)(list(records))

    def clear(self) -> None:
        self._retry(self.store.clear)()

    def get_record(self, identity: str) -> Optional[ProductRecord]:
        return self.store.get_record(identity)

    def count_records(self) -> int:
        return self.store.count_records()

    def close(self) -> None:
        self.store.close()
