"""Period manifest persistence.

The manifest is written once every chunk of a period is on disk, so its
presence marks emission as complete for resumed runs.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
import json
import os
from pathlib import Path

from core.constants import PARTIAL_FILE_SUFFIX
from core.errors import GambitStoreError
from core.types import PeriodManifest


def write_period_manifest(manifest_path: Path, manifest: PeriodManifest) -> None:
    """Atomically write a period manifest file.

    Args:
        manifest_path: Final manifest path.
        manifest: Manifest payload.

    Raises:
        GambitStoreError: If the file cannot be written.
    """
    payload = asdict(manifest)
    payload["chunk_files"] = list(manifest.chunk_files)
    payload["generated_at"] = manifest.generated_at.isoformat()
    partial_path = manifest_path.with_name(manifest_path.name + PARTIAL_FILE_SUFFIX)
    try:
        partial_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        os.replace(partial_path, manifest_path)
    except OSError as error:
        raise GambitStoreError(
            f"Failed to write period manifest at {manifest_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def read_period_manifest(manifest_path: Path) -> PeriodManifest:
    """Load a period manifest file.

    Args:
        manifest_path: Manifest path.

    Returns:
        Parsed manifest.

    Raises:
        GambitStoreError: If the manifest is missing or invalid.
    """
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
        return PeriodManifest(
            period=str(payload["period"]),
            record_count=int(payload["record_count"]),
            rejected_count=int(payload["rejected_count"]),
            chunk_files=tuple(str(name) for name in payload["chunk_files"]),
            generated_at=datetime.fromisoformat(payload["generated_at"]),
        )
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as error:
        raise GambitStoreError(
            f"Failed to read period manifest at {manifest_path}: {error}. "
            "Delete the manifest to rebuild the period's chunks."
        ) from error
