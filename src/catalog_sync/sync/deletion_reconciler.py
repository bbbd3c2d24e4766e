"""
Deletion reconciler: removes store records that are absent from the snapshot.

Walks the store's identities in ascending pages using an exclusive cursor
(the last identity of the previous page) rather than an offset, so each page
costs the same no matter how far the scan has progressed. Memory holds one
page of identities plus the snapshot index, never the store's full key set.
"""

from typing import List, Optional

from ..audit.logger import CatalogSyncLogger
from ..config.models import DEFAULT_BATCH_SIZE
from ..exceptions import StoreOperationError
from ..store.base import CatalogStore
from .metrics import SyncMetrics
from .snapshot_index import SnapshotIndex


class DeletionReconciler:
    """Deletes every stored identity that the snapshot index does not contain."""

    def __init__(
        self,
        store: CatalogStore,
        logger: CatalogSyncLogger,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """
        Initialize the deletion reconciler.

        Args:
            store: Store to reconcile
            logger: Logger instance
            batch_size: Number of identities fetched per range scan
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.store = store
        self.logger = logger
        self.batch_size = batch_size

    def reconcile(self, index: SnapshotIndex) -> SyncMetrics:
        """
        Delete stored identities missing from the index.

        Args:
            index: Snapshot index holding the desired identities

        Returns:
            Metrics with the deleted count

        Raises:
            StoreOperationError: If a page breaks the sorted, cursor-exclusive
                range scan contract
        """
        last_id: Optional[str] = None
        deleted_count = 0
        pages = 0

        while True:
            page = self.store.range_scan_identities(
                greater_than=last_id, limit=self.batch_size
            )
            if not page:
                break

            pages += 1
            self._check_page(page, last_id)

            missing = [identity for identity in page if identity not in index]
            if missing:
                result = self.store.batch_delete(missing)
                deleted_count += result.deleted_count
                self.logger.debug(
                    f"Deleted {result.deleted_count} of {len(page)} products in page {pages}"
                )

            last_id = page[-1]

            if len(page) < self.batch_size:
                break

        self.logger.info(
            f"Scanned {pages} pages of stored products, deleted {deleted_count}"
        )
        return SyncMetrics(deleted=deleted_count)

    def _check_page(self, page: List[str], last_id: Optional[str]) -> None:
        if len(page) > self.batch_size:
            raise StoreOperationError(
                f"Range scan returned {len(page)} identities, limit was {self.batch_size}"
            )
        if last_id is not None and page[0] <= last_id:
            raise StoreOperationError(
                f"Range scan returned {page[0]!r}, not after cursor {last_id!r}"
            )
        for previous, current in zip(page, page[1:]):
            if current <= previous:
                raise StoreOperationError(
                    f"Range scan is not strictly ascending: {previous!r} then {current!r}"
                )
