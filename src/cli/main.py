"""Gambit CLI entry points.
This module exposes commands for fleet ingest, period listing, and local parsing.
It maps argparse commands onto pipeline calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import GambitConfig
from core.constants import DEFAULT_END_PERIOD, DEFAULT_START_PERIOD
from core.errors import GambitConfigError
from core.logging_config import configure_logging
from core.types import FleetReport, Period
from ingest.fleet import run_fleet
from ingest.fleet_plan import load_fleet_plan
from ingest.period_range import enumerate_periods, unique_periods
from parse.archive_parser import parse_archive_file


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="gambit", description="Gambit archive ingest CLI")
    parser.add_argument("--data-root", help="Override GAMBIT_DATA_ROOT for this command")
    parser.add_argument("--log-level", help="Override GAMBIT_LOG_LEVEL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_ingest_command(subparsers)
    _add_periods_command(subparsers)
    _add_parse_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Gambit CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        configure_logging(config.log_level)
        if args.command == "ingest":
            return _run_ingest_command(config, args)
        if args.command == "periods":
            return _run_periods_command(args)
        if args.command == "parse":
            return _run_parse_command(config, args)
    except GambitConfigError as error:
        parser.error(str(error))
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> GambitConfig:
    """Build runtime config with command-line overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured runtime config.
    """
    config = GambitConfig.from_env()
    if args.data_root:
        config = replace(config, data_root=Path(args.data_root).expanduser().resolve())
    if args.log_level:
        config = replace(config, log_level=args.log_level)
    if getattr(args, "chunk_size", None) is not None:
        config = replace(config, chunk_size=_positive(args.chunk_size, "--chunk-size"))
    if getattr(args, "workers", None) is not None:
        config = replace(config, parse_workers=_positive(args.workers, "--workers"))
    if getattr(args, "max_parallel", None) is not None:
        config = replace(
            config, max_parallel_periods=_positive(args.max_parallel, "--max-parallel")
        )
    return config


def _run_ingest_command(config: GambitConfig, args: argparse.Namespace) -> int:
    """Handle ingest command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code, ``0`` only when every period succeeded.
    """
    report = run_fleet(_select_periods(args), config)
    _print_report(report)
    return 0 if report.all_succeeded else 1


def _run_periods_command(args: argparse.Namespace) -> int:
    """Handle periods command."""
    for period in _select_periods(args):
        print(period.label)
    return 0


def _run_parse_command(config: GambitConfig, args: argparse.Namespace) -> int:
    """Handle parse command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    archive_path = Path(args.archive).expanduser()
    if not archive_path.is_file():
        raise GambitConfigError(f"Archive file does not exist at {archive_path}.")
    result = parse_archive_file(archive_path, config.parse_workers)
    print(f"parsed={len(result.records)}")
    print(f"rejected={result.rejected_count}")
    return 0


def _select_periods(args: argparse.Namespace) -> list[Period]:
    """Resolve the periods named by ``--plan``, ``--period``, or ``--start/--end``."""
    if args.plan:
        return load_fleet_plan(args.plan).resolve_periods()
    explicit_periods = [Period.parse(label) for label in args.period or []]
    if explicit_periods and not (args.start or args.end):
        return unique_periods(explicit_periods)
    start = Period.parse(args.start or DEFAULT_START_PERIOD)
    end = Period.parse(args.end or DEFAULT_END_PERIOD)
    return unique_periods([*explicit_periods, *enumerate_periods(start, end)])


def _print_report(report: FleetReport) -> None:
    for result in report.succeeded:
        print(
            f"{result.period.label}\tok\t"
            f"records={result.record_count}\t"
            f"rejected={result.rejected_count}\t"
            f"chunks={len(result.chunk_paths)}"
        )
    for failure in report.failed:
        print(f"{failure.period.label}\tfailed\t{failure.error_type}: {failure.message}")


def _positive(value: int, option_name: str) -> int:
    if value < 1:
        raise GambitConfigError(f"Invalid {option_name} value {value}: expected value >= 1.")
    return value


def _add_period_selection_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the shared period selection options."""
    parser.add_argument("--start", help=f"First period YYYY-MM (default {DEFAULT_START_PERIOD})")
    parser.add_argument("--end", help=f"Last period YYYY-MM (default {DEFAULT_END_PERIOD})")
    parser.add_argument(
        "--period",
        action="append",
        help="Explicit period YYYY-MM; repeat to add more",
    )
    parser.add_argument("--plan", help="YAML fleet plan file; overrides other selection flags")


def _add_ingest_command(subparsers: Any) -> None:
    """Register ingest subcommand."""
    parser = subparsers.add_parser("ingest", help="Fetch, parse, and chunk monthly archives")
    _add_period_selection_arguments(parser)
    parser.add_argument("--chunk-size", type=int, help="Records per output chunk")
    parser.add_argument("--workers", type=int, help="Parser worker processes shared by all periods")
    parser.add_argument("--max-parallel", type=int, help="Maximum periods running at once")


def _add_periods_command(subparsers: Any) -> None:
    """Register periods subcommand."""
    parser = subparsers.add_parser("periods", help="List the periods a selection resolves to")
    _add_period_selection_arguments(parser)


def _add_parse_command(subparsers: Any) -> None:
    """Register parse subcommand."""
    parser = subparsers.add_parser("parse", help="Parse a local PGN archive and report counts")
    parser.add_argument("archive", help="Path to a decompressed .pgn archive")
    parser.add_argument("--workers", type=int, help="Parser worker processes")
