"""Tests for reading snapshot files."""

import pytest

from catalog_sync.catalog.snapshot_reader import SnapshotReader
from catalog_sync.exceptions import ConfigurationError, MalformedRecordError


def test_skips_header_and_blank_lines(tmp_path, make_record, logger):
    path = tmp_path / "snapshot.csv"
    path.write_text(
        "_id,name,price,createdAt,updatedAt\r\n"
        "\r\n"
        "a,Product_a,1.00,2024-05-01T10:00:00Z,2024-05-01T10:00:00Z\r\n"
        "   \n"
        "b,Product_b,2.00,2024-05-01T10:00:00Z,2024-05-01T10:00:00Z\n",
        encoding="utf-8",
    )

    records = list(SnapshotReader(path, logger))

    assert [r.product_id for r in records] == ["a", "b"]
    assert records[1].price == make_record("b", price="2").price


def test_header_only_snapshot_is_empty(write_snapshot, logger):
    assert list(SnapshotReader(write_snapshot([]), logger)) == []


def test_missing_file_is_configuration_error(tmp_path, logger):
    with pytest.raises(ConfigurationError, match="Snapshot file not found"):
        list(SnapshotReader(tmp_path / "absent.csv", logger))


def test_malformed_line_reports_file_line_number(write_snapshot, make_record, logger):
    path = write_snapshot([make_record("a"), "b,Product_b,oops,2024-05-01T10:00:00Z,2024-05-01T10:00:00Z"])

    with pytest.raises(MalformedRecordError) as excinfo:
        list(SnapshotReader(path, logger))

    assert excinfo.value.line_number == 3


def test_skip_malformed_counts_skipped_rows(write_snapshot, make_record, logger):
    path = write_snapshot([make_record("a"), "garbage", make_record("c"), "x,y"])
    reader = SnapshotReader(path, logger, skip_malformed=True)

    records = list(reader)

    assert [r.product_id for r in records] == ["a", "c"]
    assert reader.skipped_rows == 2


def test_invalid_utf8_line_is_malformed(write_snapshot, make_record, logger):
    path = write_snapshot([make_record("a")])
    with open(path, "ab") as f:
        f.write(b"b,\xff\xfe,1.00,2024-05-01T10:00:00Z,2024-05-01T10:00:00Z\n")

    with pytest.raises(MalformedRecordError, match="Line 3: invalid utf-8") as excinfo:
        list(SnapshotReader(path, logger))

    assert excinfo.value.line_number == 3


def test_skip_malformed_skips_invalid_utf8(write_snapshot, make_record, logger):
    path = write_snapshot([make_record("a")])
    with open(path, "ab") as f:
        f.write(b"b,\xff\xfe,1.00,2024-05-01T10:00:00Z,2024-05-01T10:00:00Z\n")
    reader = SnapshotReader(path, logger, skip_malformed=True)

    records = list(reader)

    assert [r.product_id for r in records] == ["a"]
    assert reader.skipped_rows == 1


def test_non_ascii_names_are_read(write_snapshot, make_record, logger):
    path = write_snapshot([make_record("é1", name="Crème brûlée")])

    assert list(SnapshotReader(path, logger)) == [make_record("é1", name="Crème brûlée")]
