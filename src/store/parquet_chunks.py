"""Parquet chunk persistence for game records.

This module partitions records into fixed-size chunks and writes each
chunk to its own Parquet file through pyarrow. Files are written to a
temporary name first and moved into place once complete.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Sequence, TypeVar

import pyarrow as pa
import pyarrow.parquet as pq

from core.constants import PARTIAL_FILE_SUFFIX
from core.errors import GambitStoreError
from core.types import GameRecord
from store.record_payload import game_record_from_row, game_record_to_row

_T = TypeVar("_T")

GAME_RECORD_SCHEMA = pa.schema(
    [
        pa.field("game_id", pa.string(), nullable=False),
        pa.field("rated", pa.bool_(), nullable=False),
        pa.field("url", pa.string(), nullable=False),
        pa.field("speed", pa.string(), nullable=False),
        pa.field("time_control", pa.string(), nullable=False),
        pa.field("white_player_name", pa.string(), nullable=False),
        pa.field("white_player_elo", pa.uint32(), nullable=False),
        pa.field("black_player_name", pa.string(), nullable=False),
        pa.field("black_player_elo", pa.uint32(), nullable=False),
        pa.field("rating_diff", pa.uint32(), nullable=False),
        pa.field("winner", pa.string()),
        pa.field("termination", pa.string(), nullable=False),
        pa.field("date", pa.date32()),
        pa.field("time", pa.time64("us")),
        pa.field("opening_name", pa.string(), nullable=False),
        pa.field("opening_eco", pa.string(), nullable=False),
    ]
)


def chunk_records(records: Iterable[_T], chunk_size: int) -> Iterator[list[_T]]:
    """Partition records into consecutive chunks.

    Args:
        records: Records in emission order.
        chunk_size: Maximum records per chunk.

    Yields:
        Lists of exactly ``chunk_size`` records, except a smaller final one.

    Raises:
        GambitStoreError: If chunk size is not positive.
    """
    _validate_chunk_size(chunk_size)
    chunk: list[_T] = []
    for record in records:
        chunk.append(record)
        if len(chunk) == chunk_size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


def write_game_chunk(records: Sequence[GameRecord], chunk_path: Path) -> None:
    """Write one chunk of records to a Parquet file.

    Args:
        records: Records for this chunk.
        chunk_path: Final Parquet file path.

    Raises:
        GambitStoreError: If the table cannot be built or written.
    """
    partial_path = chunk_path.with_name(chunk_path.name + PARTIAL_FILE_SUFFIX)
    try:
        table = pa.Table.from_pylist(
            [game_record_to_row(record) for record in records],
            schema=GAME_RECORD_SCHEMA,
        )
        pq.write_table(table, str(partial_path))
        os.replace(partial_path, chunk_path)
    except (OSError, pa.ArrowException) as error:
        partial_path.unlink(missing_ok=True)
        raise GambitStoreError(
            f"Failed to write game chunk at {chunk_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def read_game_chunk(chunk_path: Path) -> list[GameRecord]:
    """Load records back from a Parquet chunk file.

    Raises:
        GambitStoreError: If the file is missing or unreadable.
    """
    try:
        table = pq.read_table(str(chunk_path))
    except (OSError, pa.ArrowException) as error:
        raise GambitStoreError(
            f"Failed to read game chunk at {chunk_path}: {error}. "
            "Delete the period manifest and rerun ingest to rebuild chunks."
        ) from error
    return [game_record_from_row(row) for row in table.to_pylist()]


def _validate_chunk_size(chunk_size: int) -> None:
    """Validate chunk size input."""
    if chunk_size < 1:
        raise GambitStoreError(
            f"Invalid chunk size {chunk_size}: expected value >= 1. "
            "Use --chunk-size or GAMBIT_CHUNK_SIZE with a positive integer."
        )
