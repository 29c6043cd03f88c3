"""Unit tests for archive-wide block splitting and parsing."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from parse.archive_parser import (
    create_parse_pool,
    iter_game_blocks,
    parse_archive_file,
    parse_archive_text,
    parse_game_blocks,
    split_game_blocks,
)
from tests.fixture_paths import header_block, sample_archive_path

_SAMPLE_URLS = [
    "https://lichess.org/j1dkb5dw",
    "https://lichess.org/a9tcp02g",
    "https://lichess.org/szom2tog",
]


def test_split_game_blocks_drops_preamble() -> None:
    """Text before the first game marker should not form a block."""
    text = sample_archive_path().read_text(encoding="utf-8")

    blocks = split_game_blocks(text)

    assert len(blocks) == 5
    assert all(block.startswith('[Event "') for block in blocks)
    assert "preamble" not in "".join(blocks)


def test_iter_game_blocks_matches_split() -> None:
    """Streaming split should produce the same blocks as the in-memory split."""
    text = sample_archive_path().read_text(encoding="utf-8")

    streamed = list(iter_game_blocks(text.splitlines(keepends=True)))

    assert streamed == split_game_blocks(text)


def test_iter_game_blocks_handles_marker_mid_line() -> None:
    """A marker that does not start a line should still start a new block."""
    lines = ['noise [Event "A"]\n', '[Site "x"]\n', 'tail[Event "B"]\n']

    assert list(iter_game_blocks(lines)) == split_game_blocks("".join(lines))


def test_parse_archive_file_counts_rejected_blocks() -> None:
    """Malformed blocks should be dropped and counted, valid ones kept in order."""
    result = parse_archive_file(sample_archive_path(), workers=1)

    assert [record.url for record in result.records] == _SAMPLE_URLS
    assert result.rejected_count == 2
    assert result.block_count == 5


def test_parse_archive_file_with_worker_pool() -> None:
    """Parallel parsing should produce the same set of records."""
    result = parse_archive_file(sample_archive_path(), workers=2)

    assert sorted(record.url for record in result.records) == sorted(_SAMPLE_URLS)
    assert result.rejected_count == 2


def test_parse_game_blocks_across_many_batches(valid_headers: dict[str, str]) -> None:
    """Blocks spanning several pool batches should all be accounted for."""
    blocks = [header_block(valid_headers)] * 2500 + ['[Event "broken"]\n']

    result = parse_game_blocks(blocks, workers=2)

    assert len(result.records) == 2500
    assert result.rejected_count == 1
    assert len({record.game_id for record in result.records}) == 2500


def test_parse_archive_text_without_games() -> None:
    """Text with no game markers should parse to nothing."""
    result = parse_archive_text("no games here\n")

    assert result.records == ()
    assert result.rejected_count == 0


def test_parse_archive_file_on_shared_executor() -> None:
    """A caller-owned executor should be used as is and left running."""
    with ThreadPoolExecutor(max_workers=2) as executor:
        first = parse_archive_file(sample_archive_path(), workers=2, executor=executor)
        second = parse_archive_file(sample_archive_path(), workers=2, executor=executor)

    assert len(first.records) == len(second.records) == 3
    assert first.rejected_count == second.rejected_count == 2


def test_create_parse_pool_builds_records(valid_headers: dict[str, str]) -> None:
    """The shared parse pool should build records in worker processes."""
    with create_parse_pool(2) as pool:
        result = parse_game_blocks([header_block(valid_headers)] * 3, workers=2, executor=pool)

    assert len(result.records) == 3
