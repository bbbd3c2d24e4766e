"""
SQLite-based product store.

Suitable for local runs and fixtures. Identities are the TEXT primary key, so
range scans follow SQLite's binary collation, which orders strings the same
way Python does.
"""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence, Union

from ..audit.logger import CatalogSyncLogger
from ..catalog.record import ProductRecord
from ..exceptions import StoreOperationError, StoreUnavailableError
from .base import CatalogStore, DeleteResult, UpsertOperation, UpsertResult

# Stays below SQLITE_MAX_VARIABLE_NUMBER on older builds
MAX_QUERY_PARAMETERS = 500

_COLUMNS = {
    "name": "name",
    "price": "price",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _chunks(values: List[str], size: int):
    for start in range(0, len(values), size):
        yield values[start:start + size]


def _is_transient(error: sqlite3.OperationalError) -> bool:
    """Busy or locked databases clear up; other operational errors do not."""
    message = str(error).lower()
    return "locked" in message or "busy" in message


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if value is not None and not isinstance(value, (str, int, float)):
        return str(value)
    return value


class SqliteCatalogStore(CatalogStore):
    """SQLite implementation of the catalog store."""

    def __init__(
        self,
        db_path: Union[str, Path],
        table_name: str = "products",
        logger: Optional[CatalogSyncLogger] = None,
    ):
        """
        Initialize the SQLite store.

        Args:
            db_path: Path to the SQLite database file, or ':memory:'
            table_name: Table holding the products
            logger: Logger instance
        """
        self.db_path = str(db_path)
        self.table_name = table_name
        self.logger = logger or CatalogSyncLogger()
        self._lock = threading.Lock()
        self.conn = self._connect()
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        """Establish database connection."""
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreUnavailableError(
                f"Cannot open SQLite store {self.db_path}: {e}"
            ) from e
        conn.row_factory = sqlite3.Row
        self.logger.debug(f"Connected to SQLite store: {self.db_path}")
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._transaction("init schema") as cursor:
            cursor.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table_name} (
                    product_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    price TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    @contextmanager
    def _transaction(self, operation: str):
        """Run statements in one transaction, translating SQLite errors."""
        with self._lock:
            try:
                with self.conn:
                    yield self.conn.cursor()
            except sqlite3.OperationalError as e:
                if not _is_transient(e):
                    raise StoreOperationError(f"SQLite {operation} failed: {e}") from e
                raise StoreUnavailableError(
                    f"SQLite store unavailable during {operation}: {e}"
                ) from e
            except sqlite3.Error as e:
                raise StoreOperationError(
                    f"SQLite {operation} failed: {e}"
                ) from e

    def _fetch_documents(
        self, cursor: sqlite3.Cursor, identities: List[str]
    ) -> Dict[str, Dict[str, Any]]:
        documents = {}
        for chunk in _chunks(identities, MAX_QUERY_PARAMETERS):
            placeholders = ",".join("?" for _ in chunk)
            cursor.execute(
                f"SELECT * FROM {self.table_name} WHERE product_id IN ({placeholders})",
                chunk,
            )
            for row in cursor.fetchall():
                documents[row["product_id"]] = {
                    field: row[column] for field, column in _COLUMNS.items()
                }
        return documents

    def batch_upsert(self, operations: Sequence[UpsertOperation]) -> UpsertResult:
        modified = 0
        inserted = 0
        with self._transaction("batch upsert") as cursor:
            existing = self._fetch_documents(
                cursor, [operation.identity for operation in operations]
            )
            for operation in operations:
                encoded = {
                    field: _encode(value)
                    for field, value in operation.set_fields.items()
                    if field in _COLUMNS
                }
                current = existing.get(operation.identity)
                if current is None:
                    columns = ["product_id"] + [_COLUMNS[f] for f in encoded]
                    placeholders = ",".join("?" for _ in columns)
                    cursor.execute(
                        f"INSERT INTO {self.table_name} ({','.join(columns)}) "
                        f"VALUES ({placeholders})",
                        [operation.identity, *encoded.values()],
                    )
                    inserted += 1
                elif any(current[f] != v for f, v in encoded.items()):
                    assignments = ",".join(f"{_COLUMNS[f]} = ?" for f in encoded)
                    cursor.execute(
                        f"UPDATE {self.table_name} SET {assignments} WHERE product_id = ?",
                        [*encoded.values(), operation.identity],
                    )
                    modified += 1

        return UpsertResult(matched_and_modified_count=modified, inserted_count=inserted)

    def range_scan_identities(
        self, greater_than: Optional[str], limit: int
    ) -> List[str]:
        with self._transaction("range scan") as cursor:
            if greater_than is None:
                cursor.execute(
                    f"SELECT product_id FROM {self.table_name} "
                    "ORDER BY product_id LIMIT ?",
                    (limit,),
                )
            else:
                cursor.execute(
                    f"SELECT product_id FROM {self.table_name} "
                    "WHERE product_id > ? ORDER BY product_id LIMIT ?",
                    (greater_than, limit),
                )
            return [row["product_id"] for row in cursor.fetchall()]

    def batch_delete(self, identities: Collection[str]) -> DeleteResult:
        deleted = 0
        with self._transaction("batch delete") as cursor:
            for chunk in _chunks(list(set(identities)), MAX_QUERY_PARAMETERS):
                placeholders = ",".join("?" for _ in chunk)
                cursor.execute(
                    f"DELETE FROM {self.table_name} WHERE product_id IN ({placeholders})",
                    chunk,
                )
                deleted += cursor.rowcount
        return DeleteResult(deleted_count=deleted)

    def insert_records(self, records: Iterable[ProductRecord]) -> int:
        rows = [
            (
                record.product_id,
                record.name,
                _encode(record.price),
                _encode(record.created_at),
                _encode(record.updated_at),
            )
            for record in records
        ]
        with self._transaction("insert") as cursor:
            cursor.executemany(
                f"INSERT INTO {self.table_name} "
                "(product_id, name, price, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    def clear(self) -> None:
        with self._transaction("clear") as cursor:
            cursor.execute(f"DELETE FROM {self.table_name}")

    def get_record(self, identity: str) -> Optional[ProductRecord]:
        with self._transaction("get record") as cursor:
            document = self._fetch_documents(cursor, [identity]).get(identity)
        if document is None:
            return None
        return ProductRecord.from_document(identity, document)

    def count_records(self) -> int:
        with self._transaction("count") as cursor:
            cursor.execute(f"SELECT COUNT(*) FROM {self.table_name}")
            return cursor.fetchone()[0]

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            self.logger.debug("Closed SQLite store connection")
