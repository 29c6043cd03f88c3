"""Archive-wide game block parsing.

This module splits decompressed archive text into game blocks and builds
records from them on a process pool. Each block is parsed independently,
so rejected blocks are simply counted and left out of the result.
"""

from __future__ import annotations

from concurrent.futures import Executor, ProcessPoolExecutor
import itertools
import multiprocessing
from pathlib import Path
from typing import Iterable, Iterator

from core.constants import GAME_START_MARKER, PARSE_BATCH_SIZE, PARSE_POOL_START_METHOD
from core.types import ArchiveParseResult, GameRecord
from parse.header_record import build_game_record


def split_game_blocks(text: str) -> list[str]:
    """Split archive text into one block per game.

    Args:
        text: Full archive text.

    Returns:
        Blocks starting at each game start marker and ending before the next.
        Text preceding the first marker is discarded.
    """
    pieces = text.split(GAME_START_MARKER)
    return [GAME_START_MARKER + piece for piece in pieces[1:]]


def iter_game_blocks(lines: Iterable[str]) -> Iterator[str]:
    """Yield game blocks from archive lines without loading the whole file.

    Lines must keep their line endings, as file iteration does. The blocks
    are identical to ``split_game_blocks`` over the concatenated text.
    """
    current: list[str] | None = None
    for line in lines:
        pieces = line.split(GAME_START_MARKER)
        if current is not None:
            current.append(pieces[0])
        for piece in pieces[1:]:
            if current is not None:
                yield "".join(current)
            current = [GAME_START_MARKER, piece]
    if current is not None:
        yield "".join(current)


def create_parse_pool(workers: int) -> ProcessPoolExecutor:
    """Create a block-parsing process pool.

    Workers are spawned rather than forked because callers run this pool
    alongside period threads.

    Args:
        workers: Worker process count.

    Returns:
        Process pool the caller must shut down.
    """
    return ProcessPoolExecutor(
        max_workers=workers,
        mp_context=multiprocessing.get_context(PARSE_POOL_START_METHOD),
    )


def parse_game_blocks(
    blocks: Iterable[str],
    workers: int = 1,
    executor: Executor | None = None,
) -> ArchiveParseResult:
    """Build records for every block, dropping blocks that fail validation.

    Args:
        blocks: Game blocks to parse.
        workers: Worker process count; ``1`` or less parses in-process and
            keeps input order. With ``executor`` it only sizes the batch window.
        executor: Optional shared pool; no pool is created when given.

    Returns:
        Parsed records and the number of rejected blocks.
    """
    if executor is not None:
        return _collect_outcomes(_map_batches(executor, blocks, max(workers, 1)))
    if workers <= 1:
        return _collect_outcomes([_build_batch(list(blocks))])
    with create_parse_pool(workers) as pool:
        return _collect_outcomes(_map_batches(pool, blocks, workers))


def parse_archive_text(text: str, workers: int = 1) -> ArchiveParseResult:
    """Parse a complete archive held in memory."""
    return parse_game_blocks(split_game_blocks(text), workers)


def parse_archive_file(
    archive_path: Path,
    workers: int = 1,
    executor: Executor | None = None,
) -> ArchiveParseResult:
    """Parse a decompressed archive file line by line.

    Args:
        archive_path: Path to the plain-text PGN archive.
        workers: Worker process count.
        executor: Optional shared pool, see ``parse_game_blocks``.

    Returns:
        Parsed records and the number of rejected blocks.
    """
    with archive_path.open("r", encoding="utf-8", errors="replace") as archive_file:
        return parse_game_blocks(iter_game_blocks(archive_file), workers, executor)


def _map_batches(
    executor: Executor,
    blocks: Iterable[str],
    workers: int,
) -> Iterator[tuple[list[GameRecord], int]]:
    """Parse block batches on a pool, a bounded window at a time."""
    batches = _batched(blocks, PARSE_BATCH_SIZE)
    while True:
        window = list(itertools.islice(batches, workers * 2))
        if not window:
            return
        yield from executor.map(_build_batch, window)


def _build_batch(blocks: list[str]) -> tuple[list[GameRecord], int]:
    """Build one batch of blocks; returns records and rejected count."""
    records: list[GameRecord] = []
    rejected_count = 0
    for block in blocks:
        record = build_game_record(block)
        if record is None:
            rejected_count += 1
        else:
            records.append(record)
    return records, rejected_count


def _collect_outcomes(
    outcomes: Iterable[tuple[list[GameRecord], int]],
) -> ArchiveParseResult:
    records: list[GameRecord] = []
    rejected_count = 0
    for batch_records, batch_rejected in outcomes:
        records.extend(batch_records)
        rejected_count += batch_rejected
    return ArchiveParseResult(records=tuple(records), rejected_count=rejected_count)


def _batched(blocks: Iterable[str], size: int) -> Iterator[list[str]]:
    iterator = iter(blocks)
    while True:
        batch = list(itertools.islice(iterator, size))
        if not batch:
            return
        yield batch
