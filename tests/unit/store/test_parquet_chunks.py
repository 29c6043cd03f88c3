"""Unit tests for Parquet chunk partitioning and persistence."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from core.errors import GambitStoreError
from parse.archive_parser import parse_archive_file
from store.parquet_chunks import (
    GAME_RECORD_SCHEMA,
    chunk_records,
    read_game_chunk,
    write_game_chunk,
)
from tests.fixture_paths import sample_archive_path


def test_chunk_records_sizes() -> None:
    """Chunks should be full except for a smaller final chunk."""
    assert [len(chunk) for chunk in chunk_records(range(5), 2)] == [2, 2, 1]
    assert [len(chunk) for chunk in chunk_records(range(4), 2)] == [2, 2]
    assert list(chunk_records([], 3)) == []


def test_chunk_records_preserves_order() -> None:
    """Concatenated chunks should equal the input sequence."""
    chunks = list(chunk_records(range(7), 3))

    assert [item for chunk in chunks for item in chunk] == list(range(7))


def test_chunk_records_rejects_non_positive_size() -> None:
    """Chunk size below one should raise a store error."""
    with pytest.raises(GambitStoreError):
        list(chunk_records([1, 2], 0))


def test_write_and_read_game_chunk(tmp_path: Path) -> None:
    """Records should read back equal to what was written."""
    records = list(parse_archive_file(sample_archive_path()).records)
    chunk_path = tmp_path / "2014-06__001.parquet"

    write_game_chunk(records, chunk_path)

    assert read_game_chunk(chunk_path) == records
    assert not (tmp_path / "2014-06__001.parquet.part").exists()


def test_written_chunk_uses_typed_schema(tmp_path: Path) -> None:
    """Chunk files should carry unsigned ratings and native date/time columns."""
    records = list(parse_archive_file(sample_archive_path()).records)
    chunk_path = tmp_path / "chunk.parquet"

    write_game_chunk(records, chunk_path)
    schema = pq.read_schema(str(chunk_path))

    assert schema.field("white_player_elo").type == pa.uint32()
    assert schema.field("date").type == pa.date32()
    assert schema.field("time").type == pa.time64("us")
    assert schema.names == GAME_RECORD_SCHEMA.names


def test_write_game_chunk_reports_missing_directory(tmp_path: Path) -> None:
    """Unwritable destinations should raise a store error."""
    records = list(parse_archive_file(sample_archive_path()).records)

    with pytest.raises(GambitStoreError):
        write_game_chunk(records, tmp_path / "missing" / "chunk.parquet")


def test_read_game_chunk_reports_missing_file(tmp_path: Path) -> None:
    """Reading a missing chunk should raise a store error."""
    with pytest.raises(GambitStoreError):
        read_game_chunk(tmp_path / "absent.parquet")
