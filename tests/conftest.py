"""Shared fixtures for catalog sync tests."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from catalog_sync.audit.logger import CatalogSyncLogger  # noqa: E402
from catalog_sync.catalog.codec import CSV_HEADER, serialize_record  # noqa: E402
from catalog_sync.catalog.record import ProductRecord  # noqa: E402
from catalog_sync.config.models import (  # noqa: E402
    CatalogSyncConfig,
    RetryConfig,
    SnapshotConfig,
    SyncConfig,
)

BASE_TIME = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def logger():
    return CatalogSyncLogger("catalog_sync_tests")


@pytest.fixture
def make_record():
    """Factory for product records with sensible defaults."""

    def _make(product_id, name=None, price="10.00", created_at=BASE_TIME, updated_at=None):
        return ProductRecord(
            product_id=product_id,
            name=name or f"Product_{product_id}",
            price=price,
            created_at=created_at,
            updated_at=updated_at or created_at,
        )

    return _make


@pytest.fixture
def write_snapshot(tmp_path):
    """Write a snapshot file from records or raw lines and return its path."""

    def _write(rows, name="snapshot.csv"):
        path = tmp_path / name
        lines = [CSV_HEADER]
        for row in rows:
            lines.append(row if isinstance(row, str) else serialize_record(row))
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config():
    """Factory for a run configuration pointing at a snapshot file."""

    def _make(snapshot_path, batch_size=1000, **overrides):
        return CatalogSyncConfig(
            snapshot=SnapshotConfig(
                path=str(snapshot_path),
                skip_malformed_records=overrides.pop("skip_malformed", False),
            ),
            sync=SyncConfig(batch_size=batch_size),
            retry=RetryConfig(max_attempts=1, retry_delay_seconds=0),
            **overrides,
        )

    return _make
