"""
Sync module for the catalog sync system.

This module provides the snapshot reconciliation engine: the snapshot index,
the batch mutator, the deletion reconciler and the manager sequencing them.
"""

from .batch_mutator import BatchMutator
from .deletion_reconciler import DeletionReconciler
from .metrics import SyncMetrics
from .snapshot_index import SnapshotIndex, ingest_snapshot
from .sync_manager import CatalogSyncManager

__all__ = [
    "BatchMutator",
    "CatalogSyncManager",
    "DeletionReconciler",
    "SnapshotIndex",
    "SyncMetrics",
    "ingest_snapshot",
]
