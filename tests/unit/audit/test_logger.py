"""Tests for logger setup."""

import json

from catalog_sync.audit.logger import CatalogSyncLogger
from catalog_sync.config.models import LoggingConfig


def test_json_format_renders_extra_fields(capsys):
    logger = CatalogSyncLogger("catalog_sync.tests.json")
    logger.setup_logging(LoggingConfig(format="json"))

    logger.info("sync started", extra={"run_id": "r-1"})

    payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert payload["event"] == "sync started"
    assert payload["level"] == "info"
    assert payload["run_id"] == "r-1"
    assert payload["logger"] == "catalog_sync.tests.json"
    assert "timestamp" in payload


def test_level_filters_records(capsys):
    logger = CatalogSyncLogger("catalog_sync.tests.level")
    logger.setup_logging(LoggingConfig(level="WARNING"))

    logger.info("hidden")
    logger.warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err


def test_setup_is_idempotent(capsys):
    logger = CatalogSyncLogger("catalog_sync.tests.repeat")
    logger.setup_logging(LoggingConfig())
    logger.setup_logging(LoggingConfig())

    logger.info("once")

    assert capsys.readouterr().err.count("once") == 1


def test_file_logging_writes_json_lines(tmp_path, capsys):
    log_file = tmp_path / "sync.log"
    logger = CatalogSyncLogger("catalog_sync.tests.file")
    logger.setup_logging(LoggingConfig(log_to_file=True, log_file_path=str(log_file)))

    logger.error("store down")
    for handler in logger.logger.handlers:
        handler.flush()

    payload = json.loads(log_file.read_text(encoding="utf-8").strip())
    assert payload["event"] == "store down"
    assert payload["level"] == "error"
