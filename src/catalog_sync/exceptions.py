"""
Exception hierarchy for the catalog sync system.

Every failure raised by the sync engine derives from CatalogSyncError so the
command line entry points can report it uniformly.
"""

from typing import Optional


class CatalogSyncError(Exception):
    """Base exception for all catalog sync failures."""


class ConfigurationError(CatalogSyncError):
    """Raised when a required run parameter is missing or invalid."""


class MalformedRecordError(CatalogSyncError):
    """Raised when a snapshot line cannot be parsed into a product record."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class StoreError(CatalogSyncError):
    """Base exception for persistent store failures."""


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached."""


class StoreOperationError(StoreError):
    """Raised when a batch call against the store fails."""
