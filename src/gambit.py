"""Public SDK surface for Gambit.

This module provides a stable import path for library users.
It re-exports the pipeline entry points and typed result models.
"""

from __future__ import annotations

from core.config import GambitConfig
from core.types import (
    ArchiveParseResult,
    FleetReport,
    GameRecord,
    Period,
    PeriodFailure,
    PeriodResult,
)
from ingest.fleet import run_fleet
from ingest.fleet_plan import FleetPlan, load_fleet_plan
from ingest.period_pipeline import run_period
from ingest.period_range import enumerate_periods
from parse.archive_parser import parse_archive_file, parse_archive_text
from parse.header_record import build_game_record
from store.parquet_chunks import read_game_chunk

__all__ = [
    "ArchiveParseResult",
    "FleetPlan",
    "FleetReport",
    "GambitConfig",
    "GameRecord",
    "Period",
    "PeriodFailure",
    "PeriodResult",
    "build_game_record",
    "enumerate_periods",
    "load_fleet_plan",
    "parse_archive_file",
    "parse_archive_text",
    "read_game_chunk",
    "run_fleet",
    "run_period",
]
