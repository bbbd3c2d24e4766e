"""
Product record model.

A ProductRecord is one entry of the catalog. The identity is immutable; every
other field may change between snapshots.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

FIELD_DELIMITER = ","
PRICE_QUANTUM = Decimal("0.01")


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProductRecord(BaseModel):
    """A single product of the catalog."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    price: Decimal
    created_at: datetime
    updated_at: datetime

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v):
        """Identity must be a non-empty single field value."""
        if not v:
            raise ValueError("product_id must not be empty")
        return _reject_separators("product_id", v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Name must fit in a single field."""
        return _reject_separators("name", v)

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v):
        """Normalize price to a non-negative amount with 2 decimal places."""
        try:
            price = Decimal(str(v))
        except InvalidOperation as e:
            raise ValueError(f"price is not a number: {v!r}") from e
        if not price.is_finite():
            raise ValueError(f"price must be finite: {v!r}")
        if price < 0:
            raise ValueError(f"price must not be negative: {v!r}")
        try:
            return price.quantize(PRICE_QUANTUM)
        except InvalidOperation as e:
            # More digits than the decimal context can hold
            raise ValueError(f"price is out of range: {v!r}") from e

    @field_validator("created_at", "updated_at")
    @classmethod
    def validate_timestamp(cls, v):
        """Naive timestamps are taken as UTC."""
        return _ensure_aware(v)

    def to_document(self) -> Dict[str, Any]:
        """Return the fields the store sets for this record."""
        return {
            "name": self.name,
            "price": self.price,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, product_id: str, document: Mapping[str, Any]) -> "ProductRecord":
        """Rebuild a record from its identity and stored fields."""
        return cls(
            product_id=product_id,
            name=document["name"],
            price=document["price"],
            created_at=document["createdAt"],
            updated_at=document["updatedAt"],
        )


def _reject_separators(field_name: str, value: str) -> str:
    if FIELD_DELIMITER in value or "\n" in value or "\r" in value:
        raise ValueError(f"{field_name} must not contain ',' or line breaks: {value!r}")
    return value
