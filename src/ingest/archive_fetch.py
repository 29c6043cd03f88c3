"""Remote archive download.

This module resolves the canonical archive URL for a period and streams
the compressed archive to disk. Downloads land in a temporary file that is
moved into place only after the transfer completes.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import requests

from core.config import GambitConfig
from core.constants import COMPRESSED_ARCHIVE_SUFFIX, DOWNLOAD_CHUNK_BYTES, PARTIAL_FILE_SUFFIX
from core.errors import GambitFetchError
from core.types import Period


def build_archive_url(config: GambitConfig, period: Period) -> str:
    """Return ``<host>/<dataset>_<YYYY>-<MM>.pgn.zst`` for a period."""
    return f"{config.archive_host}/{config.dataset_name}_{period.label}{COMPRESSED_ARCHIVE_SUFFIX}"


def download_archive(
    url: str,
    destination: Path,
    timeout_seconds: float | None = None,
    session: Any = None,
) -> int:
    """Stream a remote archive to a local file.

    Args:
        url: Archive URL.
        destination: Final file path; replaced atomically on success.
        timeout_seconds: Optional socket timeout, ``None`` waits indefinitely.
        session: Optional ``requests.Session``-like object for connection reuse.

    Returns:
        Number of bytes written.

    Raises:
        GambitFetchError: If the remote reports a non-success status or the
            transfer fails.
    """
    http = session if session is not None else requests
    partial_path = destination.with_name(destination.name + PARTIAL_FILE_SUFFIX)
    try:
        with http.get(url, stream=True, timeout=timeout_seconds) as response:
            if not response.ok:
                raise GambitFetchError(
                    f"Failed to download {url}: remote returned status "
                    f"{response.status_code}. Check that the archive exists for this period."
                )
            byte_count = _write_response_body(response, partial_path)
        os.replace(partial_path, destination)
    except requests.RequestException as error:
        partial_path.unlink(missing_ok=True)
        raise GambitFetchError(
            f"Failed to download {url}: {error}. Check network access and retry ingest."
        ) from error
    except OSError as error:
        partial_path.unlink(missing_ok=True)
        raise GambitFetchError(
            f"Failed to save {url} to {destination}: {error}. "
            "Check write permissions and available disk space."
        ) from error
    return byte_count


def _write_response_body(response: Any, partial_path: Path) -> int:
    """Write the streamed response body and return the byte count."""
    byte_count = 0
    with partial_path.open("wb") as output_file:
        for block in response.iter_content(chunk_size=DOWNLOAD_CHUNK_BYTES):
            if block:
                output_file.write(block)
                byte_count += len(block)
    return byte_count
