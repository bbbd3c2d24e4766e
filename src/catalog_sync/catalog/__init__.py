"""
Catalog module: product records, the snapshot line codec and the snapshot reader.
"""

from .codec import CSV_HEADER, parse_record, serialize_record
from .record import ProductRecord
from .snapshot_reader import SnapshotReader

__all__ = [
    "CSV_HEADER",
    "ProductRecord",
    "SnapshotReader",
    "parse_record",
    "serialize_record",
]
