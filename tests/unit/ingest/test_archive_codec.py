"""Unit tests for zstandard archive decompression."""

from __future__ import annotations

from pathlib import Path

import pytest
import zstandard

from core.errors import GambitCodecError
from ingest.archive_codec import decompress_archive
from tests.fixture_paths import sample_archive_path


def test_decompress_archive_restores_text(tmp_path: Path) -> None:
    """Decompressed output should match the original bytes."""
    original = sample_archive_path().read_bytes()
    source = tmp_path / "2014-06.pgn.zst"
    source.write_bytes(zstandard.ZstdCompressor().compress(original))
    destination = tmp_path / "2014-06.pgn"

    byte_count = decompress_archive(source, destination)

    assert byte_count == len(original)
    assert destination.read_bytes() == original
    assert not (tmp_path / "2014-06.pgn.part").exists()


def test_decompress_archive_rejects_corrupt_input(tmp_path: Path) -> None:
    """Corrupt input should raise a codec error and leave no output."""
    source = tmp_path / "2014-06.pgn.zst"
    source.write_bytes(b"this is not a zstandard frame")
    destination = tmp_path / "2014-06.pgn"

    with pytest.raises(GambitCodecError):
        decompress_archive(source, destination)

    assert not destination.exists()
    assert not (tmp_path / "2014-06.pgn.part").exists()


def test_decompress_archive_reports_missing_source(tmp_path: Path) -> None:
    """A missing compressed archive should raise a codec error."""
    with pytest.raises(GambitCodecError):
        decompress_archive(tmp_path / "absent.pgn.zst", tmp_path / "absent.pgn")


def test_decompress_archive_rejects_truncated_frame(tmp_path: Path) -> None:
    """A download cut short should fail instead of yielding a short archive."""
    original = sample_archive_path().read_bytes() * 50
    payload = zstandard.ZstdCompressor().compress(original)
    source = tmp_path / "2014-06.pgn.zst"
    source.write_bytes(payload[: len(payload) // 2])
    destination = tmp_path / "2014-06.pgn"

    with pytest.raises(GambitCodecError, match="end marker"):
        decompress_archive(source, destination)

    assert not destination.exists()
    assert not (tmp_path / "2014-06.pgn.part").exists()


def test_decompress_archive_rejects_empty_input(tmp_path: Path) -> None:
    """An empty compressed file holds no frame and should fail."""
    source = tmp_path / "2014-06.pgn.zst"
    source.write_bytes(b"")

    with pytest.raises(GambitCodecError):
        decompress_archive(source, tmp_path / "2014-06.pgn")

    assert not (tmp_path / "2014-06.pgn").exists()
