"""
Catalog sync manager.

This module sequences one full reconciliation run: ingest the snapshot,
upsert the snapshot's records, delete stored records missing from the
snapshot, then report the merged metrics.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from ..audit.logger import CatalogSyncLogger
from ..catalog.snapshot_reader import SnapshotReader
from ..config.models import CatalogSyncConfig, RunSummary
from ..store.base import CatalogStore
from ..utils import peak_memory_mb
from .batch_mutator import BatchMutator
from .deletion_reconciler import DeletionReconciler
from .metrics import SyncMetrics
from .snapshot_index import ingest_snapshot


class CatalogSyncManager:
    """Manager for coordinating one snapshot reconciliation run."""

    def __init__(
        self,
        config: CatalogSyncConfig,
        store: CatalogStore,
        logger: CatalogSyncLogger,
        run_id: Optional[str] = None,
    ):
        """
        Initialize the sync manager.

        Args:
            config: System configuration
            store: Store to reconcile; the manager is its only writer
            logger: Logger instance
            run_id: Optional run identifier
        """
        self.config = config
        self.store = store
        self.logger = logger
        self.run_id = run_id or str(uuid.uuid4())
        self.metrics = SyncMetrics.zero()

    def run_sync(self) -> RunSummary:
        """
        Run a full reconciliation of the store against the snapshot.

        Any stage failure halts the run. Store changes already applied stay
        applied; re-running with the same snapshot converges.

        Returns:
            RunSummary with the run's metrics and status
        """
        start_time = datetime.now(timezone.utc)
        self.metrics = SyncMetrics.zero()

        self.logger.info(
            f"Starting catalog sync (run_id: {self.run_id})",
            extra={"run_id": self.run_id, "snapshot": self.config.snapshot.path},
        )

        try:
            reader = SnapshotReader(
                self.config.snapshot.path,
                self.logger,
                skip_malformed=self.config.snapshot.skip_malformed_records,
            )
            index = ingest_snapshot(reader, self.logger)
            self.metrics = self.metrics.merge(
                SyncMetrics(
                    rows_processed=index.rows_processed,
                    rows_skipped=reader.skipped_rows,
                )
            )
            self.logger.info(
                f"Indexed {len(index)} distinct products from "
                f"{index.rows_processed} snapshot rows"
            )

            mutator = BatchMutator(
                self.store,
                self.logger,
                batch_size=self.config.sync.batch_size,
                max_workers=self.config.concurrency.max_workers,
            )
            self.metrics = self.metrics.merge(mutator.apply(index))

            reconciler = DeletionReconciler(
                self.store, self.logger, batch_size=self.config.sync.batch_size
            )
            self.metrics = self.metrics.merge(reconciler.reconcile(index))

            summary = self.create_summary(
                start_time, "completed", store_record_count=self.store.count_records()
            )
            self.log_metrics()
            return summary

        except Exception as e:
            error_msg = f"Catalog sync failed: {str(e)}"
            self.logger.error(error_msg, extra={"run_id": self.run_id}, exc_info=True)
            return self.create_summary(start_time, "failed", error_message=error_msg)

    def log_metrics(self) -> None:
        """Log the run's counters."""
        self.logger.info(f"Processed {self.metrics.rows_processed} CSV rows.")
        if self.metrics.rows_skipped:
            self.logger.info(f"Skipped {self.metrics.rows_skipped} malformed CSV rows.")
        self.logger.info(f"Added {self.metrics.added} new products.")
        self.logger.info(f"Updated {self.metrics.updated} existing products.")
        self.logger.info(f"Deleted {self.metrics.deleted} products.")
        self.logger.info(f"Peak memory usage: {peak_memory_mb():.1f} MB")

    def create_summary(
        self,
        start_time: datetime,
        status: str,
        store_record_count: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> RunSummary:
        """
        Create a run summary object from the current metrics.

        Args:
            start_time: Run start time
            status: completed or failed
            store_record_count: Number of records in the store after the run
            error_message: Optional error message
        """
        end_time = datetime.now(timezone.utc)
        duration = (end_time - start_time).total_seconds()

        summary_text = (
            f"Sync {status} in {duration:.1f}s. "
            f"Processed {self.metrics.rows_processed} rows: "
            f"{self.metrics.added} added, {self.metrics.updated} updated, "
            f"{self.metrics.deleted} deleted"
        )

        return RunSummary(
            run_id=self.run_id,
            start_time=start_time.isoformat(),
            end_time=end_time.isoformat(),
            duration=duration,
            status=status,
            rows_processed=self.metrics.rows_processed,
            rows_skipped=self.metrics.rows_skipped,
            added=self.metrics.added,
            updated=self.metrics.updated,
            deleted=self.metrics.deleted,
            store_record_count=store_record_count,
            peak_memory_mb=peak_memory_mb(),
            error_message=error_message,
            summary=summary_text,
        )
