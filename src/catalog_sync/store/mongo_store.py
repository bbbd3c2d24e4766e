"""
MongoDB product store.

Products live in one collection keyed by _id. Prices are stored as Decimal128
so amounts round-trip exactly.
"""

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence

from bson.decimal128 import Decimal128
from pymongo import ASCENDING, MongoClient, UpdateOne
from pymongo.errors import ConnectionFailure, PyMongoError

from ..audit.logger import CatalogSyncLogger
from ..catalog.record import ProductRecord
from ..config.models import DEFAULT_COLLECTION_NAME, DEFAULT_DATABASE_NAME
from ..exceptions import StoreOperationError, StoreUnavailableError
from .base import CatalogStore, DeleteResult, UpsertOperation, UpsertResult


def _encode(document: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: Decimal128(value) if isinstance(value, Decimal) else value
        for key, value in document.items()
    }


def _decode(document: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.to_decimal() if isinstance(value, Decimal128) else value
        for key, value in document.items()
    }


class MongoCatalogStore(CatalogStore):
    """MongoDB implementation of the catalog store."""

    def __init__(
        self,
        url: str,
        database_name: Optional[str] = None,
        collection_name: str = DEFAULT_COLLECTION_NAME,
        server_selection_timeout_ms: int = 5000,
        logger: Optional[CatalogSyncLogger] = None,
        client: Optional[MongoClient] = None,
    ):
        """
        Initialize the MongoDB store.

        Args:
            url: MongoDB connection string; its path names the default database
            database_name: Database override, takes precedence over the url
            collection_name: Collection holding the products
            server_selection_timeout_ms: How long to wait for a reachable server
            logger: Logger instance
            client: Preconfigured client, mainly for tests
        """
        self.logger = logger or CatalogSyncLogger()
        self.client = client or MongoClient(
            url,
            serverSelectionTimeoutMS=server_selection_timeout_ms,
            tz_aware=True,
        )
        if database_name:
            database = self.client.get_database(database_name)
        else:
            database = self.client.get_default_database(default=DEFAULT_DATABASE_NAME)
        self.collection = database[collection_name]
        self.logger.debug(f"Using MongoDB collection {collection_name}")

    @contextmanager
    def _translate_errors(self, operation: str):
        try:
            yield
        except ConnectionFailure as e:
            raise StoreUnavailableError(
                f"MongoDB unavailable during {operation}: {e}"
            ) from e
        except PyMongoError as e:
            raise StoreOperationError(f"MongoDB {operation} failed: {e}") from e

    def batch_upsert(self, operations: Sequence[UpsertOperation]) -> UpsertResult:
        if not operations:
            return UpsertResult()

        requests = [
            UpdateOne(
                {"_id": operation.identity},
                {"$set": _encode(operation.set_fields)},
                upsert=True,
            )
            for operation in operations
        ]
        with self._translate_errors("batch upsert"):
            result = self.collection.bulk_write(requests, ordered=False)

        return UpsertResult(
            matched_and_modified_count=result.modified_count,
            inserted_count=result.upserted_count,
        )

    def range_scan_identities(
        self, greater_than: Optional[str], limit: int
    ) -> List[str]:
        query = {"_id": {"$gt": greater_than}} if greater_than is not None else {}
        with self._translate_errors("range scan"):
            cursor = (
                self.collection.find(query, projection={"_id": 1})
                .sort("_id", ASCENDING)
                .limit(limit)
            )
            return [document["_id"] for document in cursor]

    def batch_delete(self, identities: Collection[str]) -> DeleteResult:
        if not identities:
            return DeleteResult()

        with self._translate_errors("batch delete"):
            result = self.collection.delete_many({"_id": {"$in": list(identities)}})
        return DeleteResult(deleted_count=result.deleted_count)

    def insert_records(self, records: Iterable[ProductRecord]) -> int:
        documents = [
            {"_id": record.product_id, **_encode(record.to_document())}
            for record in records
        ]
        if not documents:
            return 0

        with self._translate_errors("insert"):
            result = self.collection.insert_many(documents)
        return len(result.inserted_ids)

    def clear(self) -> None:
        with self._translate_errors("clear"):
            self.collection.drop()

    def get_record(self, identity: str) -> Optional[ProductRecord]:
        with self._translate_errors("get record"):
            document = self.collection.find_one({"_id": identity})
        if document is None:
            return None
        return ProductRecord.from_document(identity, _decode(document))

    def count_records(self) -> int:
        with self._translate_errors("count"):
            return self.collection.count_documents({})

    def close(self) -> None:
        self.client.close()
