"""
Abstract product store used by the sync engine.

Backends implement batched upserts, batched deletes and ordered range scans
over identities. The deletion pass relies on the range scan contract: results
are strictly ascending by identity and every identity is greater than the
cursor, so consecutive pages never overlap and never skip an identity.
"""

from abc import ABC, abstractmethod
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from ..catalog.record import ProductRecord


class UpsertOperation(BaseModel):
    """Set the fields of one identity, inserting it when absent."""

    model_config = ConfigDict(frozen=True)

    identity: str
    set_fields: Dict[str, Any]

    @classmethod
    def from_record(cls, record: ProductRecord) -> "UpsertOperation":
        return cls(identity=record.product_id, set_fields=record.to_document())


class UpsertResult(BaseModel):
    """Outcome of one batched upsert call.

    Identities that matched but whose fields were already equal count as
    neither modified nor inserted.
    """

    matched_and_modified_count: int = 0
    inserted_count: int = 0


class DeleteResult(BaseModel):
    """Outcome of one batched delete call."""

    deleted_count: int = 0


class CatalogStore(ABC):
    """Persistent collection of product records addressable by identity."""

    @abstractmethod
    def batch_upsert(self, operations: Sequence[UpsertOperation]) -> UpsertResult:
        """
        Apply a batch of upserts in one round trip.

        Args:
            operations: Upserts targeting distinct identities

        Returns:
            Counts of modified and newly inserted records
        """

    @abstractmethod
    def range_scan_identities(
        self, greater_than: Optional[str], limit: int
    ) -> List[str]:
        """
        Return up to `limit` identities strictly greater than `greater_than`.

        Args:
            greater_than: Exclusive lower bound, None to start from the beginning
            limit: Maximum number of identities to return

        Returns:
            Identities sorted in strictly ascending order
        """

    @abstractmethod
    def batch_delete(self, identities: Collection[str]) -> DeleteResult:
        """
        Delete a set of identities in one round trip.

        Args:
            identities: Identities to delete; unknown identities are ignored

        Returns:
            Number of records actually deleted
        """

    @abstractmethod
    def insert_records(self, records: Iterable[ProductRecord]) -> int:
        """Insert new records, returning how many were written."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every record from the store."""

    @abstractmethod
    def get_record(self, identity: str) -> Optional[ProductRecord]:
        """Return the stored record for an identity, or None."""

    @abstractmethod
    def count_records(self) -> int:
        """Return the number of stored records."""

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
