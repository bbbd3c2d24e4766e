"""
Snapshot index: the desired end state of one sync run.

Maps identity to record with last-write-wins semantics. The whole snapshot is
held in memory; the store's key set never is.
"""

from typing import Dict, Iterable, Iterator, Optional

from ..audit.logger import CatalogSyncLogger
from ..catalog.record import ProductRecord

PROGRESS_LOG_INTERVAL = 10000


class SnapshotIndex:
    """Identity to record mapping built by folding a record stream."""

    def __init__(self):
        self._records: Dict[str, ProductRecord] = {}
        self.rows_processed = 0

    def add(self, record: ProductRecord) -> None:
        """Store a record, replacing any earlier record with the same identity."""
        self._records[record.product_id] = record
        self.rows_processed += 1

    def get(self, identity: str) -> Optional[ProductRecord]:
        return self._records.get(identity)

    def records(self) -> Iterator[ProductRecord]:
        """Iterate over the authoritative records, in no meaningful order."""
        return iter(self._records.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)


def ingest_snapshot(
    records: Iterable[ProductRecord], logger: Optional[CatalogSyncLogger] = None
) -> SnapshotIndex:
    """
    Build a snapshot index from a record stream.

    Args:
        records: Records in snapshot order
        logger: Optional logger for progress output

    Returns:
        Index holding the last record seen for every identity
    """
    index = SnapshotIndex()
    for record in records:
        index.add(record)
        if logger and index.rows_processed % PROGRESS_LOG_INTERVAL == 0:
            logger.debug(f"Processed {index.rows_processed} rows...")
    return index
