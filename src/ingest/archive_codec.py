"""Zstandard archive decompression.

This module stream-decodes a compressed archive into plain PGN text.
Output is written to a temporary file and moved into place only once the
zstd frame has been decoded to its end, so a truncated download never
leaves an archive that looks complete.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

import zstandard

from core.constants import DECOMPRESS_CHUNK_BYTES, PARTIAL_FILE_SUFFIX, ZSTD_MAX_WINDOW_SIZE
from core.errors import GambitCodecError


def decompress_archive(source: Path, destination: Path) -> int:
    """Decompress a ``.zst`` archive.

    Args:
        source: Compressed archive path.
        destination: Final decompressed file path.

    Returns:
        Number of decompressed bytes written.

    Raises:
        GambitCodecError: If the input is corrupt, truncated, or cannot be read.
    """
    partial_path = destination.with_name(destination.name + PARTIAL_FILE_SUFFIX)
    try:
        with source.open("rb") as input_file, partial_path.open("wb") as output_file:
            byte_count, frame_complete = _decode_stream(input_file, output_file)
        if not frame_complete:
            raise GambitCodecError(
                f"Failed to decompress {source}: the zstd frame ends before its end marker. "
                "Delete the compressed archive so the next run downloads it again."
            )
        os.replace(partial_path, destination)
    except GambitCodecError:
        partial_path.unlink(missing_ok=True)
        raise
    except zstandard.ZstdError as error:
        partial_path.unlink(missing_ok=True)
        raise GambitCodecError(
            f"Failed to decompress {source}: {error}. "
            "Delete the compressed archive so the next run downloads it again."
        ) from error
    except OSError as error:
        partial_path.unlink(missing_ok=True)
        raise GambitCodecError(
            f"Failed to decompress {source} into {destination}: {error}. "
            "Check the archive path and available disk space."
        ) from error
    return byte_count


def _decode_stream(input_file: BinaryIO, output_file: BinaryIO) -> tuple[int, bool]:
    """Decode compressed blocks; returns bytes written and whether the frame ended."""
    decoder = zstandard.ZstdDecompressor(max_window_size=ZSTD_MAX_WINDOW_SIZE).decompressobj()
    byte_count = 0
    while block := input_file.read(DECOMPRESS_CHUNK_BYTES):
        output = decoder.decompress(block)
        output_file.write(output)
        byte_count += len(output)
    return byte_count, decoder.eof
