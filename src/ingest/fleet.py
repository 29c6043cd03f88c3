"""Concurrent orchestration of period pipelines.

This module launches one period pipeline per period on a thread pool and
waits for every one of them. A failing period is logged and reported but
never cancels or affects the others. All periods share one block-parsing
process pool, so the worker process count stays at ``parse_workers``
however many periods run at once.
"""

from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor, as_completed
from contextlib import ExitStack
from typing import Callable, Iterable

from core.config import GambitConfig
from core.logging_config import get_logger
from core.types import FleetReport, Period, PeriodFailure, PeriodResult
from ingest.period_pipeline import run_period
from ingest.period_range import unique_periods
from parse.archive_parser import create_parse_pool

# Called as ``runner(period, config, parse_executor=pool)``.
PeriodRunner = Callable[..., PeriodResult]

_LOGGER = get_logger(__name__)


def run_fleet(
    periods: Iterable[Period],
    config: GambitConfig,
    period_runner: PeriodRunner = run_period,
) -> FleetReport:
    """Run every period concurrently and collect each terminal state.

    Args:
        periods: Periods to process; duplicates run once.
        config: Runtime configuration.
        period_runner: Callable running one period, ``run_period`` by default.
            It receives the shared parse pool as ``parse_executor``, which is
            ``None`` when ``config.parse_workers`` is 1.

    Returns:
        Report of succeeded and failed periods, both in chronological order.
    """
    planned_periods = unique_periods(periods)
    if not planned_periods:
        return FleetReport()
    max_workers = config.max_parallel_periods or len(planned_periods)
    _LOGGER.info(
        "fleet_started",
        period_count=len(planned_periods),
        max_parallel_periods=max_workers,
        parse_workers=config.parse_workers,
    )
    with ExitStack() as stack:
        parse_pool: Executor | None = None
        if config.parse_workers > 1:
            parse_pool = stack.enter_context(create_parse_pool(config.parse_workers))
        executor = stack.enter_context(
            ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="period")
        )
        futures = {
            executor.submit(period_runner, period, config, parse_executor=parse_pool): period
            for period in planned_periods
        }
        outcomes = [_resolve_outcome(futures[future], future) for future in as_completed(futures)]
    report = FleetReport(
        succeeded=tuple(
            sorted(
                (outcome for outcome in outcomes if isinstance(outcome, PeriodResult)),
                key=lambda result: result.period,
            )
        ),
        failed=tuple(
            sorted(
                (outcome for outcome in outcomes if isinstance(outcome, PeriodFailure)),
                key=lambda failure: failure.period,
            )
        ),
    )
    _LOGGER.info(
        "fleet_completed",
        succeeded=[result.period.label for result in report.succeeded],
        failed=[failure.period.label for failure in report.failed],
    )
    return report


def _resolve_outcome(period: Period, future: Future) -> PeriodResult | PeriodFailure:
    """Turn a finished future into a result or a logged failure."""
    error = future.exception()
    if error is None:
        return future.result()
    _LOGGER.error(
        "period_failed",
        period=period.label,
        error_type=type(error).__name__,
        error=str(error),
    )
    return PeriodFailure(period=period, error_type=type(error).__name__, message=str(error))
