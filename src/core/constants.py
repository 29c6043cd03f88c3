"""Core constants used across Gambit modules.

This module centralizes archive naming, workspace layout, and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path("lichess_data")
DEFAULT_ARCHIVE_HOST = "https://database.lichess.org/standard"
DEFAULT_DATASET_NAME = "lichess_db_standard_rated"
DEFAULT_CHUNK_SIZE = 100_000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_START_PERIOD = "2013-08"
DEFAULT_END_PERIOD = "2017-04"
COMPRESSED_ARCHIVE_SUFFIX = ".pgn.zst"
DECOMPRESSED_ARCHIVE_SUFFIX = ".pgn"
CHUNK_FILE_SUFFIX = ".parquet"
MANIFEST_FILE_SUFFIX = ".manifest.json"
PARTIAL_FILE_SUFFIX = ".part"
CHUNK_INDEX_WIDTH = 3
GAME_START_MARKER = "[Event "
UNKNOWN_DATE_SENTINEL = "????.??.??"
UNKNOWN_TIME_SENTINEL = "??:??:??"
PGN_DATE_FORMAT = "%Y.%m.%d"
PGN_TIME_FORMAT = "%H:%M:%S"
REQUIRED_HEADER_TAGS = (
    "Event",
    "Site",
    "White",
    "Black",
    "WhiteElo",
    "BlackElo",
    "TimeControl",
    "Result",
    "UTCDate",
    "UTCTime",
    "Opening",
    "ECO",
    "Termination",
)
DOWNLOAD_CHUNK_BYTES = 1024 * 1024
DECOMPRESS_CHUNK_BYTES = 1024 * 1024
ZSTD_MAX_WINDOW_SIZE = 2**31
PARSE_BATCH_SIZE = 2048
PARSE_POOL_START_METHOD = "spawn"
MAX_PLAYER_RATING = 2**31 - 1
SUPPORTED_PLAN_VERSION = 1
