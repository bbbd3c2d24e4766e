#!/usr/bin/env python3
"""
Command-line interface for the synthetic catalog generator.

Seeds the configured store with a random catalog and writes the snapshot
that a later sync run should converge to.
"""

import argparse
import sys

from ..config.loader import ConfigLoader
from ..config.models import CatalogSyncConfig
from ..exceptions import ConfigurationError
from ..fixtures.generator import CatalogGenerator
from ..main import create_logger
from ..store.store_factory import create_store


def run_generate_command(config: CatalogSyncConfig) -> int:
    """
    Run the generator with the given configuration.

    Args:
        config: Validated configuration; generator.size must be set

    Returns:
        Exit code (0 for success)
    """
    if not config.generator.size:
        raise ConfigurationError("Missing 'size' parameter")

    logger = create_logger(config)
    logger.info(
        f"Generating {config.generator.size} products into {config.store.url}, "
        f"snapshot {config.snapshot.path}"
    )

    with create_store(config.store, config.retry, logger) as store:
        generator = CatalogGenerator(
            store, logger, config.generator, batch_size=config.sync.batch_size
        )
        generator.generate(config.snapshot.path)

    return 0


def main(argv=None):
    """Main entry point for the generator CLI."""
    parser = argparse.ArgumentParser(
        description="Catalog snapshot fixture generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seed 100000 products and write updated-catalog.csv
  catalog-generate --size 100000

  # Reproducible fixture in a local SQLite store
  catalog-generate --size 1000 --seed 7 --store-url sqlite:///catalog.db
        """,
    )

    parser.add_argument(
        "config_file", nargs="?", help="Path to the YAML configuration file"
    )
    parser.add_argument("--size", type=int, help="Number of products to generate")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--store-url", help="Store connection url")
    parser.add_argument("--snapshot-path", help="Snapshot CSV file to write")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    try:
        config = ConfigLoader.with_overrides(
            ConfigLoader.load(args.config_file),
            store_url=args.store_url,
            snapshot_path=args.snapshot_path,
            generator_size=args.size,
            generator_seed=args.seed,
            log_level="DEBUG" if args.verbose else None,
        )
        exit_code = run_generate_command(config)

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        exit_code = 1
    except Exception as e:
        print(f"Catalog generation failed: {e}", file=sys.stderr)
        exit_code = 1

    print("SUCCESS" if exit_code == 0 else "FAIL")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
