"""
Snapshot file reader.

Yields product records from a snapshot file, skipping the header line and
blank lines.
"""

from pathlib import Path
from typing import Iterator, Optional, Union

from ..audit.logger import CatalogSyncLogger
from ..exceptions import ConfigurationError, MalformedRecordError
from .codec import parse_record
from .record import ProductRecord

SNAPSHOT_ENCODING = "utf-8"


def _decode_line(raw_line: bytes, line_number: int) -> str:
    try:
        return raw_line.decode(SNAPSHOT_ENCODING)
    except UnicodeDecodeError as e:
        raise MalformedRecordError(
            f"invalid {SNAPSHOT_ENCODING} data: {e.reason} at byte {e.start}",
            line_number=line_number,
            line=raw_line.decode(SNAPSHOT_ENCODING, errors="replace"),
        ) from e


class SnapshotReader:
    """Iterates over the records of a snapshot file."""

    def __init__(
        self,
        path: Union[str, Path],
        logger: Optional[CatalogSyncLogger] = None,
        skip_malformed: bool = False,
    ):
        """
        Initialize the reader.

        Args:
            path: Snapshot file path
            logger: Logger used to report skipped lines
            skip_malformed: Skip and count malformed lines instead of failing
        """
        self.path = Path(path)
        self.logger = logger or CatalogSyncLogger()
        self.skip_malformed = skip_malformed
        self.skipped_rows = 0

    def __iter__(self) -> Iterator[ProductRecord]:
        return self.read()

    def read(self) -> Iterator[ProductRecord]:
        """
        Yield every record of the snapshot in file order.

        Raises:
            ConfigurationError: If the snapshot file does not exist
            MalformedRecordError: If a line cannot be parsed and skipping
                is disabled
        """
        if not self.path.is_file():
            raise ConfigurationError(f"Snapshot file not found: {self.path}")

        # Binary mode so an undecodable line is reported with its line number
        with open(self.path, "rb") as f:
            for line_number, raw_line in enumerate(f, start=1):
                # Header
                if line_number == 1:
                    continue

                try:
                    line = _decode_line(raw_line, line_number)
                    if not line.strip():
                        continue
                    yield parse_record(line, line_number=line_number)
                except MalformedRecordError as e:
                    if not self.skip_malformed:
                        raise
                    self.skipped_rows += 1
                    self.logger.warning(f"Skipping malformed snapshot row: {e}")
