"""
Run metrics accumulator.

SyncMetrics is an immutable value with a zero element and an associative
merge, so per-batch results can be produced independently and folded.
"""

from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field


class SyncMetrics(BaseModel):
    """Counters reported at the end of a sync run."""

    model_config = ConfigDict(frozen=True)

    added: int = Field(default=0, ge=0)
    updated: int = Field(default=0, ge=0)
    deleted: int = Field(default=0, ge=0)
    rows_processed: int = Field(default=0, ge=0)
    rows_skipped: int = Field(default=0, ge=0)

    @classmethod
    def zero(cls) -> "SyncMetrics":
        return cls()

    def merge(self, other: "SyncMetrics") -> "SyncMetrics":
        """Return the field-wise sum of two metrics."""
        return SyncMetrics(
            added=self.added + other.added,
            updated=self.updated + other.updated,
            deleted=self.deleted + other.deleted,
            rows_processed=self.rows_processed + other.rows_processed,
            rows_skipped=self.rows_skipped + other.rows_skipped,
        )

    def __add__(self, other: "SyncMetrics") -> "SyncMetrics":
        return self.merge(other)


def merge_all(metrics: Iterable[SyncMetrics]) -> SyncMetrics:
    """Fold any number of metrics starting from zero."""
    total = SyncMetrics.zero()
    for item in metrics:
        total = total.merge(item)
    return total
