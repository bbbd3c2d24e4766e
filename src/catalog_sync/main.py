#!/usr/bin/env python3
"""
Main entry point for the catalog sync system.

This module provides the primary CLI: one full reconciliation of the
configured store against the configured snapshot file.
"""

import argparse
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from .audit.logger import CatalogSyncLogger
from .config.loader import ConfigLoader
from .config.models import CatalogSyncConfig, RunSummary
from .exceptions import ConfigurationError
from .store.store_factory import create_store
from .sync.sync_manager import CatalogSyncManager


def create_logger(config: CatalogSyncConfig) -> CatalogSyncLogger:
    """Create logger instance from configuration."""
    logger = CatalogSyncLogger("catalog_sync")
    logger.setup_logging(config.logging)
    return logger


def print_summary(summary: RunSummary, console: Optional[Console] = None) -> None:
    """Print the run counters as a table on standard output."""
    console = console or Console()
    table = Table(title=f"Catalog sync {summary.run_id}")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    table.add_row("Rows processed", str(summary.rows_processed))
    if summary.rows_skipped:
        table.add_row("Rows skipped", str(summary.rows_skipped))
    table.add_row("Added", str(summary.added))
    table.add_row("Updated", str(summary.updated))
    table.add_row("Deleted", str(summary.deleted))
    if summary.store_record_count is not None:
        table.add_row("Products in store", str(summary.store_record_count))
    if summary.peak_memory_mb is not None:
        table.add_row("Peak memory (MB)", f"{summary.peak_memory_mb:.1f}")
    console.print(table)


def run_sync_command(config: CatalogSyncConfig, validate_only: bool = False) -> int:
    """
    Run one reconciliation with the given configuration.

    Args:
        config: Validated configuration
        validate_only: Only validate configuration

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    logger = create_logger(config)
    logger.info(
        f"Syncing {config.snapshot.path} into {config.store.url} "
        f"(batch size {config.sync.batch_size})"
    )

    if validate_only:
        logger.info("Configuration validation completed successfully")
        return 0

    with create_store(config.store, config.retry, logger) as store:
        manager = CatalogSyncManager(config, store, logger)
        summary = manager.run_sync()

    print_summary(summary)
    if summary.status != "completed":
        print(summary.error_message, file=sys.stderr)
        return 1
    return 0


def main(argv=None):
    """Main entry point for the catalog sync CLI."""
    parser = argparse.ArgumentParser(
        description="Reconcile a product store against a full catalog snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync the default snapshot into the default local MongoDB
  catalog-sync

  # Sync with a configuration file, overriding the store
  catalog-sync config.yaml --store-url sqlite:///catalog.db
        """,
    )

    parser.add_argument(
        "config_file", nargs="?", help="Path to the YAML configuration file"
    )
    parser.add_argument("--store-url", help="Store connection url")
    parser.add_argument("--snapshot-path", help="Snapshot CSV file to sync")
    parser.add_argument(
        "--batch-size", type=int, help="Records per store round trip (default: 1000)"
    )
    parser.add_argument(
        "--max-workers", type=int, help="Concurrent upsert batches (default: 1)"
    )
    parser.add_argument(
        "--skip-malformed",
        action="store_true",
        default=None,
        help="Skip and count malformed snapshot rows instead of failing",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate configuration without running the sync",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    try:
        config = ConfigLoader.with_overrides(
            ConfigLoader.load(args.config_file),
            store_url=args.store_url,
            snapshot_path=args.snapshot_path,
            batch_size=args.batch_size,
            max_workers=args.max_workers,
            skip_malformed=args.skip_malformed,
            log_level="DEBUG" if args.verbose else None,
        )
        exit_code = run_sync_command(config, validate_only=args.validate_only)

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        exit_code = 1
    except Exception as e:
        print(f"Catalog sync failed: {e}", file=sys.stderr)
        exit_code = 1

    print("SUCCESS" if exit_code == 0 else "FAIL")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
