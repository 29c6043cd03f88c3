"""Per-period workspace layout.

This module owns the on-disk layout of one period: its directory, the
compressed and decompressed archives, numbered chunk files, and the
completion manifest. Stage artifacts found here let resumed runs skip work.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import (
    CHUNK_FILE_SUFFIX,
    CHUNK_INDEX_WIDTH,
    COMPRESSED_ARCHIVE_SUFFIX,
    DECOMPRESSED_ARCHIVE_SUFFIX,
    MANIFEST_FILE_SUFFIX,
    PARTIAL_FILE_SUFFIX,
)
from core.errors import GambitStoreError
from core.types import Period


class PeriodWorkspace:
    """Filesystem layout for one period under the data root."""

    def __init__(self, data_root: Path, period: Period) -> None:
        self._period = period
        self._directory = data_root / str(period.year) / f"{period.month:02d}"

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def compressed_path(self) -> Path:
        return self._directory / f"{self._period.label}{COMPRESSED_ARCHIVE_SUFFIX}"

    @property
    def decompressed_path(self) -> Path:
        return self._directory / f"{self._period.label}{DECOMPRESSED_ARCHIVE_SUFFIX}"

    @property
    def manifest_path(self) -> Path:
        return self._directory / f"{self._period.label}{MANIFEST_FILE_SUFFIX}"

    def ensure(self) -> Path:
        """Create the period directory if it does not exist.

        Raises:
            GambitStoreError: If the directory cannot be created.
        """
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise GambitStoreError(
                f"Failed to create period workspace at {self._directory}: {error}. "
                "Check permissions on the data root."
            ) from error
        return self._directory

    def chunk_path(self, chunk_index: int) -> Path:
        """Return the file path for a one-based chunk index."""
        return self._directory / (
            f"{self._period.label}__{chunk_index:0{CHUNK_INDEX_WIDTH}d}{CHUNK_FILE_SUFFIX}"
        )

    def chunk_paths(self) -> list[Path]:
        """Return existing chunk files in index order."""
        pattern = f"{self._period.label}__*{CHUNK_FILE_SUFFIX}"
        return sorted(self._directory.glob(pattern))

    def has_compressed_archive(self) -> bool:
        return self.compressed_path.is_file()

    def has_decompressed_archive(self) -> bool:
        return self.decompressed_path.is_file()

    def has_manifest(self) -> bool:
        return self.manifest_path.is_file()

    def discard_manifest(self) -> None:
        """Remove the completion manifest so the next run emits again.

        Raises:
            GambitStoreError: If the manifest cannot be removed.
        """
        try:
            self.manifest_path.unlink(missing_ok=True)
        except OSError as error:
            raise GambitStoreError(
                f"Failed to remove period manifest at {self.manifest_path}: {error}. "
                "Delete it by hand and rerun ingest."
            ) from error

    def clear_incomplete_emission(self) -> int:
        """Remove chunk files left behind by an interrupted emission.

        Only called while no manifest exists, so every chunk on disk belongs
        to a run that never completed.

        Returns:
            Number of files removed.
        """
        stale_paths = self.chunk_paths()
        stale_paths.extend(self._directory.glob(f"*{CHUNK_FILE_SUFFIX}{PARTIAL_FILE_SUFFIX}"))
        for file_path in stale_paths:
            file_path.unlink(missing_ok=True)
        return len(stale_paths)
