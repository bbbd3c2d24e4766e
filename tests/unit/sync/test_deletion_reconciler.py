"""Tests for cursor-paginated deletion of store-only identities."""

import math

import pytest

from catalog_sync.exceptions import StoreOperationError
from catalog_sync.store.memory_store import InMemoryCatalogStore
from catalog_sync.sync.deletion_reconciler import DeletionReconciler
from catalog_sync.sync.snapshot_index import ingest_snapshot


class ScanRecordingStore(InMemoryCatalogStore):
    """Memory store that records every range scan page and delete call."""

    def __init__(self, records=None):
        super().__init__(records)
        self.pages = []
        self.cursors = []
        self.delete_calls = []

    def range_scan_identities(self, greater_than, limit):
        page = super().range_scan_identities(greater_than, limit)
        self.cursors.append(greater_than)
        self.pages.append(page)
        return page

    def batch_delete(self, identities):
        self.delete_calls.append(sorted(identities))
        return super().batch_delete(identities)


class FixedPagesStore(InMemoryCatalogStore):
    """Store returning canned pages regardless of the cursor."""

    def __init__(self, pages):
        super().__init__()
        self._pages = list(pages)

    def range_scan_identities(self, greater_than, limit):
        return self._pages.pop(0) if self._pages else []


def _ids(count):
    return [f"id-{i:04d}" for i in range(count)]


def test_deletes_identities_missing_from_snapshot(make_record, logger):
    store = ScanRecordingStore([make_record(i) for i in ["A", "B", "C", "D"]])
    index = ingest_snapshot([make_record("A"), make_record("C")])

    metrics = DeletionReconciler(store, logger, batch_size=1000).reconcile(index)

    assert metrics.deleted == 2
    assert store.range_scan_identities(None, 10) == ["A", "C"]
    assert store.delete_calls == [["B", "D"]]


def test_empty_store_terminates_after_one_scan(logger):
    store = ScanRecordingStore()

    metrics = DeletionReconciler(store, logger, batch_size=3).reconcile(ingest_snapshot([]))

    assert metrics.deleted == 0
    assert store.pages == [[]]
    assert store.delete_calls == []


@pytest.mark.parametrize("count, batch_size", [(10, 3), (9, 3), (1, 5), (5, 5), (7, 1)])
def test_scan_count_and_coverage(make_record, logger, count, batch_size):
    ids = _ids(count)
    store = ScanRecordingStore([make_record(i) for i in ids])
    index = ingest_snapshot([make_record(i) for i in ids])

    DeletionReconciler(store, logger, batch_size=batch_size).reconcile(index)

    expected_scans = math.ceil(count / batch_size)
    if count % batch_size == 0:
        expected_scans += 1
    assert len(store.pages) == expected_scans

    scanned = [identity for page in store.pages for identity in page]
    assert scanned == ids
    assert len(set(scanned)) == len(scanned)
    assert store.delete_calls == []


def test_cursor_advances_to_last_identity_of_each_page(make_record, logger):
    ids = _ids(7)
    store = ScanRecordingStore([make_record(i) for i in ids])

    DeletionReconciler(store, logger, batch_size=3).reconcile(ingest_snapshot([]))

    assert store.cursors == [None, "id-0002", "id-0005"]
    assert store.count_records() == 0


def test_deletions_spread_over_pages(make_record, logger):
    ids = _ids(12)
    keep = ids[::3]
    store = ScanRecordingStore([make_record(i) for i in ids])

    metrics = DeletionReconciler(store, logger, batch_size=4).reconcile(
        ingest_snapshot([make_record(i) for i in keep])
    )

    assert metrics.deleted == 8
    assert len(store.delete_calls) == 3
    assert store.range_scan_identities(None, 100) == keep


def test_unsorted_page_violates_store_contract(logger):
    store = FixedPagesStore([["b", "a"]])

    with pytest.raises(StoreOperationError, match="strictly ascending"):
        DeletionReconciler(store, logger, batch_size=5).reconcile(ingest_snapshot([]))


def test_page_not_after_cursor_violates_store_contract(logger):
    store = FixedPagesStore([["a", "b"], ["b", "c"]])

    with pytest.raises(StoreOperationError, match="not after cursor"):
        DeletionReconciler(store, logger, batch_size=2).reconcile(ingest_snapshot([]))


def test_oversized_page_violates_store_contract(logger):
    store = FixedPagesStore([["a", "b", "c"]])

    with pytest.raises(StoreOperationError, match="limit was 2"):
        DeletionReconciler(store, logger, batch_size=2).reconcile(ingest_snapshot([]))
