"""
Snapshot line codec.

Fields are positional: _id, name, price, createdAt, updatedAt. The order is
fixed by the snapshot fixture format, so parsing never looks at the header.
"""

from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from ..exceptions import MalformedRecordError
from .record import FIELD_DELIMITER, ProductRecord

FIELD_NAMES = ("_id", "name", "price", "createdAt", "updatedAt")
CSV_HEADER = FIELD_DELIMITER.join(FIELD_NAMES)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z' for UTC."""
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def parse_record(line: str, line_number: Optional[int] = None) -> ProductRecord:
    """
    Parse one snapshot line into a product record.

    Args:
        line: Raw line without its line terminator
        line_number: Position of the line in its source, used in errors

    Returns:
        Parsed product record

    Raises:
        MalformedRecordError: If the line has the wrong number of fields or
            a price or timestamp field cannot be converted
    """
    fields = line.rstrip("\r\n").split(FIELD_DELIMITER)
    if len(fields) != len(FIELD_NAMES):
        raise MalformedRecordError(
            f"expected {len(FIELD_NAMES)} fields, got {len(fields)}",
            line_number=line_number,
            line=line,
        )

    product_id, name, price, created_at, updated_at = fields
    try:
        return ProductRecord(
            product_id=product_id,
            name=name,
            price=price,
            created_at=parse_timestamp(created_at),
            updated_at=parse_timestamp(updated_at),
        )
    except ValidationError as e:
        raise MalformedRecordError(
            e.errors()[0]["msg"], line_number=line_number, line=line
        ) from e
    except ValueError as e:
        raise MalformedRecordError(
            f"invalid timestamp: {e}", line_number=line_number, line=line
        ) from e


def serialize_record(record: ProductRecord) -> str:
    """Serialize a record into one snapshot line, the inverse of parse_record."""
    return FIELD_DELIMITER.join(
        [
            record.product_id,
            record.name,
            f"{record.price:.2f}",
            record.created_at.isoformat(),
            record.updated_at.isoformat(),
        ]
    )
