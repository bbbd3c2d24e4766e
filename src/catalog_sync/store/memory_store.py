"""
In-memory product store.

Keeps documents in a dict. Used for tests and for local dry runs through the
memory:// store url.
"""

import threading
from bisect import bisect_left, bisect_right
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence

from ..catalog.record import ProductRecord
from ..exceptions import StoreOperationError
from .base import CatalogStore, DeleteResult, UpsertOperation, UpsertResult


class InMemoryCatalogStore(CatalogStore):
    """Dict backed implementation of the catalog store."""

    def __init__(self, records: Optional[Iterable[ProductRecord]] = None):
        self._documents: Dict[str, Dict[str, Any]] = {}
        # Sorted identities, rebuilt lazily after inserts; deletes keep it in order
        self._sorted_ids: Optional[List[str]] = None
        self._lock = threading.Lock()
        if records is not None:
            self.insert_records(records)

    def _ordered_identities(self) -> List[str]:
        if self._sorted_ids is None:
            self._sorted_ids = sorted(self._documents)
        return self._sorted_ids

    def _discard_sorted(self, identity: str) -> None:
        if self._sorted_ids is None:
            return
        position = bisect_left(self._sorted_ids, identity)
        if position < len(self._sorted_ids) and self._sorted_ids[position] == identity:
            del self._sorted_ids[position]

    def batch_upsert(self, operations: Sequence[UpsertOperation]) -> UpsertResult:
        modified = 0
        inserted = 0
        with self._lock:
            for operation in operations:
                current = self._documents.get(operation.identity)
                if current is None:
                    self._documents[operation.identity] = dict(operation.set_fields)
                    self._sorted_ids = None
                    inserted += 1
                    continue

                updated = {**current, **operation.set_fields}
                if updated != current:
                    self._documents[operation.identity] = updated
                    modified += 1

        return UpsertResult(matched_and_modified_count=modified, inserted_count=inserted)

    def range_scan_identities(
        self, greater_than: Optional[str], limit: int
    ) -> List[str]:
        with self._lock:
            identities = self._ordered_identities()
            start = 0 if greater_than is None else bisect_right(identities, greater_than)
            return identities[start:start + limit]

    def batch_delete(self, identities: Collection[str]) -> DeleteResult:
        deleted = 0
        with self._lock:
            for identity in set(identities):
                if self._documents.pop(identity, None) is not None:
                    self._discard_sorted(identity)
                    deleted += 1
        return DeleteResult(deleted_count=deleted)

    def insert_records(self, records: Iterable[ProductRecord]) -> int:
        inserted = 0
        with self._lock:
            for record in records:
                if record.product_id in self._documents:
                    raise StoreOperationError(
                        f"Duplicate product id on insert: {record.product_id}"
                    )
                self._documents[record.product_id] = record.to_document()
                self._sorted_ids = None
                inserted += 1
        return inserted

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
            self._sorted_ids = None

    def get_record(self, identity: str) -> Optional[ProductRecord]:
        with self._lock:
            document = self._documents.get(identity)
        if document is None:
            return None
        return ProductRecord.from_document(identity, document)

    def count_records(self) -> int:
        with self._lock:
            return len(self._documents)
