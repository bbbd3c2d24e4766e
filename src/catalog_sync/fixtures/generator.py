"""
Synthetic catalog generator.

Seeds the store with a random catalog and writes the snapshot a sync run
should converge to. Each generated product draws one event: delete, update,
add (the product stays and a new one is added next to it) or unchanged.
"""

import random
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import List, Optional, TextIO, Union

from ..audit.logger import CatalogSyncLogger
from ..catalog.codec import CSV_HEADER, serialize_record
from ..catalog.record import PRICE_QUANTUM, ProductRecord
from ..config.models import DEFAULT_BATCH_SIZE, GenerationSummary, GeneratorConfig
from ..exceptions import ConfigurationError
from ..store.base import CatalogStore
from ..utils import utc_now


class ProductEvent(str, Enum):
    """Change drawn for a generated product."""

    DELETE = "delete"
    UPDATE = "update"
    ADD = "add"
    UNCHANGED = "unchanged"


class CatalogGenerator:
    """Generates a seeded store and the matching snapshot file."""

    def __init__(
        self,
        store: CatalogStore,
        logger: CatalogSyncLogger,
        config: Optional[GeneratorConfig] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """
        Initialize the generator.

        Args:
            store: Store to seed; it is cleared first
            logger: Logger instance
            config: Generator configuration (probabilities, seed, size)
            batch_size: Number of products per store insert
        """
        self.store = store
        self.logger = logger
        self.config = config or GeneratorConfig()
        self.batch_size = batch_size
        self.rng = random.Random(self.config.seed)

    def generate(
        self, output_path: Union[str, Path], size: Optional[int] = None
    ) -> GenerationSummary:
        """
        Seed the store and write the snapshot file.

        Args:
            output_path: Snapshot file to (re)create
            size: Number of products to seed, defaults to the configured size

        Returns:
            Summary with the changes a sync run is expected to apply

        Raises:
            ConfigurationError: If no catalog size is given
        """
        catalog_size = size if size is not None else self.config.size
        if not catalog_size:
            raise ConfigurationError("Missing 'size' parameter")

        output_path = Path(output_path)
        self.store.clear()
        if output_path.exists():
            output_path.unlink()

        summary = GenerationSummary(
            catalog_size=catalog_size, snapshot_path=str(output_path)
        )
        created_at = utc_now()
        products: List[ProductRecord] = []
        progress_step = max(catalog_size // 10, 1)

        with open(output_path, "w", encoding="utf-8", newline="") as snapshot:
            snapshot.write(CSV_HEADER + "\n")

            for i in range(catalog_size):
                product = self._generate_product(i, created_at)
                products.append(product)

                event = self._draw_event()
                self._write_event(snapshot, summary, event, product, i, catalog_size)

                if len(products) == self.batch_size or i == catalog_size - 1:
                    self.store.insert_records(products)
                    products = []

                if i % progress_step == 0:
                    self.logger.debug(f"Processing {i * 100 // catalog_size}%...")

        self.log_summary(summary)
        return summary

    def _generate_product(self, index: int, created_at: datetime) -> ProductRecord:
        return ProductRecord(
            product_id=str(uuid.UUID(int=self.rng.getrandbits(128), version=4)),
            name=f"Product_{index}",
            price=self._generate_price(),
            created_at=created_at,
            updated_at=created_at,
        )

    def _generate_price(self) -> Decimal:
        return (Decimal(self.rng.randint(0, 100000)) / 100).quantize(PRICE_QUANTUM)

    def _draw_event(self) -> ProductEvent:
        roll = self.rng.random() * 100
        threshold = self.config.delete_probability
        if roll < threshold:
            return ProductEvent.DELETE
        threshold += self.config.update_probability
        if roll < threshold:
            return ProductEvent.UPDATE
        threshold += self.config.add_probability
        if roll < threshold:
            return ProductEvent.ADD
        return ProductEvent.UNCHANGED

    def _write_event(
        self,
        snapshot: TextIO,
        summary: GenerationSummary,
        event: ProductEvent,
        product: ProductRecord,
        index: int,
        catalog_size: int,
    ) -> None:
        if event == ProductEvent.DELETE:
            summary.expected_deleted += 1
            return

        lines = [product]
        if event == ProductEvent.UPDATE:
            lines = [
                ProductRecord(
                    product_id=product.product_id,
                    name=f"Product_{index + catalog_size}",
                    price=self._generate_price(),
                    created_at=product.created_at,
                    updated_at=utc_now(),
                )
            ]
            summary.expected_updated += 1
        elif event == ProductEvent.ADD:
            lines.append(self._generate_product(index + catalog_size, utc_now()))
            summary.expected_added += 1

        for record in lines:
            snapshot.write(serialize_record(record) + "\n")
            summary.rows_written += 1

    def log_summary(self, summary: GenerationSummary) -> None:
        """Log the expected outcome of syncing the generated snapshot."""
        size = summary.catalog_size
        self.logger.info(f"{size} products inserted in store.")
        self.logger.info(f"{summary.expected_added} products to be added.")
        self.logger.info(
            f"{summary.expected_updated} products to be updated "
            f"{summary.expected_updated * 100 / size:.2f}%."
        )
        self.logger.info(
            f"{summary.expected_deleted} products to be deleted "
            f"{summary.expected_deleted * 100 / size:.2f}%."
        )
