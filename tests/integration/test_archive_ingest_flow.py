"""Integration tests for the multi-period archive ingest workflow."""

from __future__ import annotations

from dataclasses import replace
from functools import partial
from pathlib import Path

import zstandard

from core.types import Period
from ingest.archive_fetch import download_archive
from ingest.fleet import run_fleet
from ingest.period_pipeline import run_period
from store.parquet_chunks import read_game_chunk
from tests.fixture_paths import sample_archive_path


class _StaticArchiveSession:
    """requests-like session that serves the compressed sample for any URL."""

    ok = True
    status_code = 200

    def __init__(self) -> None:
        self.requested_urls: list[str] = []
        self._payload = zstandard.ZstdCompressor().compress(sample_archive_path().read_bytes())

    def get(self, url: str, stream: bool, timeout: float | None) -> "_StaticArchiveSession":
        self.requested_urls.append(url)
        return self

    def __enter__(self) -> "_StaticArchiveSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def iter_content(self, chunk_size: int):
        for offset in range(0, len(self._payload), 64):
            yield self._payload[offset : offset + 64]


def _fetcher_for(session: _StaticArchiveSession):
    def fetch(url: str, destination: Path) -> int:
        return download_archive(url, destination, session=session)

    return fetch


def test_fleet_ingest_then_resume(gambit_config) -> None:
    """Periods should ingest end to end and a rerun should reuse every artifact."""
    config = replace(gambit_config, chunk_size=1)
    session = _StaticArchiveSession()
    periods = [Period(2013, 12), Period(2014, 1)]
    period_runner = partial(run_period, fetcher=_fetcher_for(session))

    first_report = run_fleet(periods, config, period_runner)

    assert first_report.all_succeeded
    assert sorted(session.requested_urls) == [
        f"{config.archive_host}/{config.dataset_name}_2013-12.pgn.zst",
        f"{config.archive_host}/{config.dataset_name}_2014-01.pgn.zst",
    ]
    game_ids = {
        record.game_id
        for result in first_report.succeeded
        for chunk_path in result.chunk_paths
        for record in read_game_chunk(chunk_path)
    }
    assert len(game_ids) == 6
    assert all(len(result.chunk_paths) == 3 for result in first_report.succeeded)

    second_report = run_fleet(periods, config, period_runner)

    assert len(session.requested_urls) == 2
    assert [result.emitted for result in second_report.succeeded] == [False, False]
    assert [result.chunk_paths for result in second_report.succeeded] == [
        result.chunk_paths for result in first_report.succeeded
    ]
