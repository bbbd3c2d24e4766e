"""
Logger for catalog sync operations.

Wraps a standard library logger and renders records through structlog so the
same call sites produce either human readable text or JSON lines.
"""

import logging
import sys
from typing import List

import structlog

from ..config.models import LoggingConfig


def _shared_processors() -> List:
    """Processors applied to every record before rendering."""
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _build_formatter(log_format: str) -> structlog.stdlib.ProcessorFormatter:
    if log_format == "json":
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )


class CatalogSyncLogger:
    """Logger used across the sync engine, generator and command line tools."""

    def __init__(self, name: str = "catalog_sync"):
        """
        Initialize the logger.

        Args:
            name: Name of the underlying standard library logger
        """
        self.name = name
        self.logger = logging.getLogger(name)

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Configure level, format and destinations from configuration.

        Args:
            config: Logging configuration
        """
        self.logger.setLevel(getattr(logging, config.level))
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = _build_formatter(config.format)

        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        self.logger.addHandler(stream_handler)

        if config.log_to_file and config.log_file_path:
            file_handler = logging.FileHandler(config.log_file_path, encoding="utf-8")
            file_handler.setFormatter(_build_formatter("json"))
            self.logger.addHandler(file_handler)

        self.logger.propagate = False

    def debug(self, msg, *args, **kwargs) -> None:
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs) -> None:
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs) -> None:
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs) -> None:
        self.logger.error(msg, *args, **kwargs)
