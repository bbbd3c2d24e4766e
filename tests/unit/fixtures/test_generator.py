"""Tests for the synthetic catalog generator."""

import pytest

from catalog_sync.catalog.codec import CSV_HEADER
from catalog_sync.config.models import GeneratorConfig
from catalog_sync.exceptions import ConfigurationError
from catalog_sync.fixtures.generator import CatalogGenerator
from catalog_sync.store.memory_store import InMemoryCatalogStore
from catalog_sync.sync.sync_manager import CatalogSyncManager


def _generator(store, logger, batch_size=16, **config):
    return CatalogGenerator(store, logger, GeneratorConfig(**config), batch_size=batch_size)


def test_seeds_store_and_writes_snapshot(tmp_path, logger):
    store = InMemoryCatalogStore()
    output = tmp_path / "updated-catalog.csv"

    summary = _generator(store, logger, seed=11).generate(output, size=200)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == CSV_HEADER
    assert len(lines) - 1 == summary.rows_written
    assert store.count_records() == 200
    assert summary.catalog_size == 200
    assert summary.rows_written == 200 - summary.expected_deleted + summary.expected_added
    assert summary.expected_added > 0
    assert summary.expected_updated > 0
    assert summary.expected_deleted > 0


def test_sync_applies_expected_changes(tmp_path, logger, make_config):
    store = InMemoryCatalogStore()
    output = tmp_path / "updated-catalog.csv"
    expected = _generator(store, logger, seed=5).generate(output, size=150)

    summary = CatalogSyncManager(make_config(output, batch_size=32), store, logger).run_sync()

    assert summary.status == "completed"
    assert summary.added == expected.expected_added
    assert summary.updated == expected.expected_updated
    assert summary.deleted == expected.expected_deleted
    assert summary.rows_processed == expected.rows_written


def test_same_seed_gives_same_identities(tmp_path, logger):
    first = tmp_path / "first.csv"
    second = tmp_path / "second.csv"

    _generator(InMemoryCatalogStore(), logger, seed=3).generate(first, size=40)
    _generator(InMemoryCatalogStore(), logger, seed=3).generate(second, size=40)

    def ids(path):
        return [line.split(",")[0] for line in path.read_text(encoding="utf-8").splitlines()]

    assert ids(first) == ids(second)


def test_delete_everything(tmp_path, logger):
    output = tmp_path / "snapshot.csv"

    summary = _generator(
        InMemoryCatalogStore(), logger, delete_probability=100, update_probability=0, add_probability=0
    ).generate(output, size=10)

    assert summary.expected_deleted == 10
    assert output.read_text(encoding="utf-8") == CSV_HEADER + "\n"


def test_regeneration_clears_previous_state(tmp_path, logger):
    store = InMemoryCatalogStore()
    output = tmp_path / "snapshot.csv"
    _generator(store, logger, seed=1).generate(output, size=30)

    _generator(store, logger, seed=2).generate(output, size=12)

    assert store.count_records() == 12


def test_size_from_config(tmp_path, logger):
    summary = _generator(InMemoryCatalogStore(), logger, size=7).generate(tmp_path / "s.csv")

    assert summary.catalog_size == 7


def test_missing_size_is_configuration_error(tmp_path, logger):
    with pytest.raises(ConfigurationError, match="Missing 'size' parameter"):
        _generator(InMemoryCatalogStore(), logger).generate(tmp_path / "s.csv")
