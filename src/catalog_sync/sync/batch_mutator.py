"""
Batch mutator: writes the snapshot index to the store as batched upserts.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterator, List

from ..audit.logger import CatalogSyncLogger
from ..config.models import DEFAULT_BATCH_SIZE
from ..store.base import CatalogStore, UpsertOperation
from .metrics import SyncMetrics, merge_all
from .snapshot_index import SnapshotIndex


class BatchMutator:
    """Applies upserts for every indexed record in fixed-size batches."""

    def __init__(
        self,
        store: CatalogStore,
        logger: CatalogSyncLogger,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int = 1,
    ):
        """
        Initialize the batch mutator.

        Args:
            store: Store receiving the upserts
            logger: Logger instance
            batch_size: Number of upserts per store round trip
            max_workers: Concurrent batches; 1 keeps a single batch in flight
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.store = store
        self.logger = logger
        self.batch_size = batch_size
        self.max_workers = max_workers

    def _batches(self, index: SnapshotIndex) -> Iterator[List[UpsertOperation]]:
        batch: List[UpsertOperation] = []
        for record in index.records():
            batch.append(UpsertOperation.from_record(record))
            if len(batch) == self.batch_size:
                yield batch
                batch = []
        if batch:
            yield batch

    def _apply_batch(self, batch: List[UpsertOperation]) -> SyncMetrics:
        result = self.store.batch_upsert(batch)
        return SyncMetrics(
            added=result.inserted_count,
            updated=result.matched_and_modified_count,
        )

    def apply(self, index: SnapshotIndex) -> SyncMetrics:
        """
        Upsert every record of the index.

        Args:
            index: Snapshot index holding the desired records

        Returns:
            Metrics with added and updated counts summed over all batches
        """
        if self.max_workers > 1:
            metrics = self._apply_concurrently(index)
        else:
            metrics = merge_all(self._apply_batch(batch) for batch in self._batches(index))

        self.logger.info(
            f"Upserted {len(index)} products: {metrics.added} added, "
            f"{metrics.updated} updated"
        )
        return metrics

    def _apply_concurrently(self, index: SnapshotIndex) -> SyncMetrics:
        """Run upsert batches on a thread pool; batches touch disjoint identities."""
        self.logger.info(f"Running upsert batches with {self.max_workers} workers")
        results: List[SyncMetrics] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._apply_batch, batch) for batch in self._batches(index)
            ]
            try:
                for future in as_completed(futures):
                    results.append(future.result())
            except Exception:
                # Abort the stage: drop batches that have not started yet
                for future in futures:
                    future.cancel()
                raise

        return merge_all(results)
