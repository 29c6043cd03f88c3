"""Runtime configuration model for Gambit.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_ARCHIVE_HOST,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_DATA_ROOT,
    DEFAULT_DATASET_NAME,
    DEFAULT_LOG_LEVEL,
)
from core.errors import GambitConfigError


@dataclass(frozen=True)
class GambitConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory holding one folder per period.
        archive_host: Base URL that serves the monthly archives.
        dataset_name: Archive file name prefix, e.g. ``lichess_db_standard_rated``.
        chunk_size: Maximum number of records per emitted chunk.
        parse_workers: Worker processes used to parse one archive.
        max_parallel_periods: Optional cap on concurrently running periods.
        fetch_timeout_seconds: Optional socket timeout for archive downloads.
        log_level: Minimum structured log level.
    """

    data_root: Path
    archive_host: str = DEFAULT_ARCHIVE_HOST
    dataset_name: str = DEFAULT_DATASET_NAME
    chunk_size: int = DEFAULT_CHUNK_SIZE
    parse_workers: int = 1
    max_parallel_periods: int | None = None
    fetch_timeout_seconds: float | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "GambitConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            GambitConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("GAMBIT_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        archive_host = os.getenv("GAMBIT_ARCHIVE_HOST", DEFAULT_ARCHIVE_HOST).rstrip("/")
        dataset_name = os.getenv("GAMBIT_DATASET", DEFAULT_DATASET_NAME)
        chunk_size = _parse_positive_int(
            "GAMBIT_CHUNK_SIZE", os.getenv("GAMBIT_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))
        )
        parse_workers = _parse_positive_int(
            "GAMBIT_PARSE_WORKERS",
            os.getenv("GAMBIT_PARSE_WORKERS", str(os.cpu_count() or 1)),
        )
        max_parallel_value = os.getenv("GAMBIT_MAX_PARALLEL_PERIODS")
        max_parallel_periods = (
            _parse_positive_int("GAMBIT_MAX_PARALLEL_PERIODS", max_parallel_value)
            if max_parallel_value
            else None
        )
        timeout_value = os.getenv("GAMBIT_FETCH_TIMEOUT")
        fetch_timeout_seconds = _parse_timeout(timeout_value) if timeout_value else None
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            archive_host=archive_host,
            dataset_name=dataset_name,
            chunk_size=chunk_size,
            parse_workers=parse_workers,
            max_parallel_periods=max_parallel_periods,
            fetch_timeout_seconds=fetch_timeout_seconds,
            log_level=os.getenv("GAMBIT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )


def _parse_positive_int(variable_name: str, raw_value: str) -> int:
    """Parse a strictly positive integer environment value.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        GambitConfigError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise GambitConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a positive number."
        ) from error
    if value < 1:
        raise GambitConfigError(
            f"Invalid {variable_name} value: expected value >= 1, got {value}."
        )
    return value


def _parse_timeout(raw_value: str) -> float:
    """Parse the fetch timeout environment value in seconds."""
    try:
        value = float(raw_value)
    except ValueError as error:
        raise GambitConfigError(
            f"Invalid GAMBIT_FETCH_TIMEOUT value: expected seconds, got '{raw_value}'."
        ) from error
    if value <= 0:
        raise GambitConfigError(
            f"Invalid GAMBIT_FETCH_TIMEOUT value: expected value > 0, got {value}."
        )
    return value
