"""
Configuration models for the catalog sync system using Pydantic.

This module defines all the configuration models that validate and parse
the YAML configuration file, plus the summary models reported by a run.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_STORE_URL = "mongodb://localhost:27017/test-product-catalog"
DEFAULT_DATABASE_NAME = "test-product-catalog"
DEFAULT_COLLECTION_NAME = "Products"
DEFAULT_SNAPSHOT_PATH = "updated-catalog.csv"
DEFAULT_BATCH_SIZE = 1000

SUPPORTED_STORE_SCHEMES = ("mongodb://", "mongodb+srv://", "sqlite:///", "memory://")


class StoreConfig(BaseModel):
    """Configuration for the persistent product store."""

    url: str = DEFAULT_STORE_URL
    database_name: Optional[str] = None
    collection_name: str = DEFAULT_COLLECTION_NAME
    server_selection_timeout_ms: int = Field(default=5000, ge=1)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        """Validate the store URL scheme."""
        if not v.startswith(SUPPORTED_STORE_SCHEMES):
            raise ValueError(
                f"Unsupported store url: {v}. "
                f"Must start with one of {list(SUPPORTED_STORE_SCHEMES)}"
            )
        return v


class SnapshotConfig(BaseModel):
    """Configuration for the snapshot input file."""

    path: str = DEFAULT_SNAPSHOT_PATH
    skip_malformed_records: bool = False


class SyncConfig(BaseModel):
    """Configuration for batch sizing of store round trips."""

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)


class ConcurrencyConfig(BaseModel):
    """Configuration for concurrency settings."""

    max_workers: int = Field(default=1, ge=1, le=32)


class RetryConfig(BaseModel):
    """Configuration for retry settings around store batch calls."""

    max_attempts: int = Field(default=3, ge=1, le=10)
    retry_delay_seconds: float = Field(default=1.0, ge=0)
    max_delay_seconds: float = Field(default=30.0, ge=0)
    retry_on_operation_errors: bool = False


class LoggingConfig(BaseModel):
    """Configuration for logging settings."""

    level: str = Field(default="INFO")
    format: str = Field(default="text")  # "text" or "json"
    log_to_file: bool = Field(default=False)
    log_file_path: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(
                f"Invalid logging level: {v}. Must be one of {valid_levels}"
            )
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v):
        """Validate logging format."""
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(
                f"Invalid logging format: {v}. Must be one of {valid_formats}"
            )
        return v.lower()

    @model_validator(mode="after")
    def validate_log_file(self):
        """Require a file path when file logging is enabled."""
        if self.log_to_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_to_file is enabled")
        return self


class GeneratorConfig(BaseModel):
    """Configuration for the synthetic catalog generator.

    Probabilities are percentages drawn in order delete, update, add; the
    remainder leaves the product unchanged.
    """

    size: Optional[int] = Field(default=None, ge=1)
    delete_probability: float = Field(default=10.0, ge=0, le=100)
    update_probability: float = Field(default=10.0, ge=0, le=100)
    add_probability: float = Field(default=20.0, ge=0, le=100)
    seed: Optional[int] = None

    @model_validator(mode="after")
    def validate_probabilities(self):
        """Ensure event probabilities fit in 100%."""
        total = self.delete_probability + self.update_probability + self.add_probability
        if total > 100:
            raise ValueError(
                f"Event probabilities add up to {total}%, must not exceed 100%"
            )
        return self


class CatalogSyncConfig(BaseModel):
    """Root configuration model for the catalog sync system."""

    version: str = "1.0"
    store: StoreConfig = Field(default_factory=StoreConfig)
    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v):
        """Validate configuration version."""
        if v != "1.0":
            raise ValueError(f"Unsupported configuration version: {v}")
        return v


class RunSummary(BaseModel):
    """Model for sync run summary logging."""

    run_id: str
    start_time: str
    end_time: Optional[str] = None
    duration: Optional[float] = None
    status: str  # started, completed, failed
    rows_processed: int = 0
    rows_skipped: int = 0
    added: int = 0
    updated: int = 0
    deleted: int = 0
    store_record_count: Optional[int] = None
    peak_memory_mb: Optional[float] = None
    error_message: Optional[str] = None
    summary: Optional[str] = None


class GenerationSummary(BaseModel):
    """Model for the expected outcome of a generated snapshot."""

    catalog_size: int
    snapshot_path: str
    rows_written: int = 0
    expected_added: int = 0
    expected_updated: int = 0
    expected_deleted: int = 0
