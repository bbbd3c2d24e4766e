"""Tests for batched upserts of the snapshot index."""

import pytest

from catalog_sync.exceptions import StoreOperationError
from catalog_sync.store.memory_store import InMemoryCatalogStore
from catalog_sync.sync.batch_mutator import BatchMutator
from catalog_sync.sync.metrics import SyncMetrics
from catalog_sync.sync.snapshot_index import ingest_snapshot


class RecordingStore(InMemoryCatalogStore):
    """Memory store that remembers the size of every upsert batch."""

    def __init__(self, records=None):
        super().__init__(records)
        self.upsert_batches = []

    def batch_upsert(self, operations):
        self.upsert_batches.append(len(operations))
        return super().batch_upsert(operations)


class FailingUpsertStore(InMemoryCatalogStore):
    def __init__(self, fail_on_call):
        super().__init__()
        self.calls = 0
        self.fail_on_call = fail_on_call

    def batch_upsert(self, operations):
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise StoreOperationError("write rejected")
        return super().batch_upsert(operations)


def test_counts_modified_and_inserted(make_record, logger):
    store = RecordingStore([make_record(i, price="1.00") for i in ["a", "b", "c"]])
    index = ingest_snapshot(
        [make_record(i, price="5.00") for i in ["a", "b", "c"]]
        + [make_record("d"), make_record("e")]
    )

    metrics = BatchMutator(store, logger, batch_size=10).apply(index)

    assert metrics == SyncMetrics(added=2, updated=3)
    assert store.upsert_batches == [5]
    assert store.get_record("a").price == make_record("a", price="5").price


def test_unchanged_records_count_as_neither(make_record, logger):
    records = [make_record(i) for i in ["a", "b"]]
    store = InMemoryCatalogStore(records)

    metrics = BatchMutator(store, logger).apply(ingest_snapshot(records))

    assert metrics == SyncMetrics.zero()


def test_partitions_into_fixed_size_batches(make_record, logger):
    store = RecordingStore()
    index = ingest_snapshot([make_record(f"p{i:02d}") for i in range(7)])

    metrics = BatchMutator(store, logger, batch_size=3).apply(index)

    assert store.upsert_batches == [3, 3, 1]
    assert metrics.added == 7
    assert store.count_records() == 7


def test_empty_index_issues_no_calls(logger):
    store = RecordingStore()

    metrics = BatchMutator(store, logger, batch_size=3).apply(ingest_snapshot([]))

    assert store.upsert_batches == []
    assert metrics == SyncMetrics.zero()


def test_concurrent_batches_merge_to_same_totals(make_record, logger):
    store = RecordingStore([make_record(f"p{i:02d}", price="1.00") for i in range(5)])
    index = ingest_snapshot(
        [make_record(f"p{i:02d}", price="2.00") for i in range(20)]
    )

    metrics = BatchMutator(store, logger, batch_size=3, max_workers=4).apply(index)

    assert metrics == SyncMetrics(added=15, updated=5)
    assert sorted(store.upsert_batches) == [2, 3, 3, 3, 3, 3, 3]


def test_batch_failure_aborts_stage(make_record, logger):
    store = FailingUpsertStore(fail_on_call=2)
    index = ingest_snapshot([make_record(f"p{i}") for i in range(6)])

    with pytest.raises(StoreOperationError):
        BatchMutator(store, logger, batch_size=2).apply(index)

    # The first batch stays applied
    assert store.count_records() == 2
    assert store.calls == 2


def test_rejects_non_positive_batch_size(logger):
    with pytest.raises(ValueError):
        BatchMutator(InMemoryCatalogStore(), logger, batch_size=0)
