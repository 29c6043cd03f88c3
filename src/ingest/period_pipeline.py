"""Per-period ingest orchestration.

This module runs the fetch, decompress, parse, and chunk-emit stages for
one period. Every stage is skipped when its artifact already exists, so a
rerun after a partial failure resumes where the previous run stopped.
"""

from __future__ import annotations

from concurrent.futures import Executor
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from core.config import GambitConfig
from core.logging_config import get_logger
from core.types import (
    ArchiveParseResult,
    GameRecord,
    Period,
    PeriodManifest,
    PeriodResult,
    PeriodStage,
)
from ingest.archive_codec import decompress_archive
from ingest.archive_fetch import build_archive_url, download_archive
from ingest.period_workspace import PeriodWorkspace
from parse.archive_parser import parse_archive_file
from store.parquet_chunks import chunk_records, write_game_chunk
from store.period_manifest import read_period_manifest, write_period_manifest

ArchiveFetcher = Callable[[str, Path], object]
ArchiveDecompressor = Callable[[Path, Path], object]
ChunkWriter = Callable[[Sequence[GameRecord], Path], None]

_LOGGER = get_logger(__name__)


class PeriodPipelineRunner:
    """Stateful runner for one resumable period pipeline execution."""

    def __init__(
        self,
        period: Period,
        config: GambitConfig,
        fetcher: ArchiveFetcher | None = None,
        decompressor: ArchiveDecompressor | None = None,
        chunk_writer: ChunkWriter | None = None,
        parse_executor: Executor | None = None,
    ) -> None:
        self._period = period
        self._config = config
        self._workspace = PeriodWorkspace(config.data_root, period)
        self._fetcher = fetcher or self._download
        self._decompressor = decompressor or decompress_archive
        self._chunk_writer = chunk_writer or write_game_chunk
        self._parse_executor = parse_executor
        self._stage = PeriodStage.WORKSPACE_READY

    @property
    def workspace(self) -> PeriodWorkspace:
        return self._workspace

    def run(self) -> PeriodResult:
        """Execute every pending stage and return the period outcome."""
        self._workspace.ensure()
        _LOGGER.info(
            "workspace_ready", period=self._period.label, path=str(self._workspace.directory)
        )
        fetched = self._fetch_archive()
        decompressed = self._decompress_archive()
        if self._workspace.has_manifest():
            completed_result = self._load_completed_result(fetched, decompressed)
            if completed_result is not None:
                return completed_result
        parse_result = self._parse_archive()
        chunk_paths = self._emit_chunks(parse_result)
        manifest_path = self._write_manifest(parse_result, chunk_paths)
        _log_period_completion(self._period, parse_result, chunk_paths)
        return PeriodResult(
            period=self._period,
            stage=self._stage,
            fetched=fetched,
            decompressed=decompressed,
            emitted=True,
            record_count=len(parse_result.records),
            rejected_count=parse_result.rejected_count,
            chunk_paths=tuple(chunk_paths),
            manifest_path=manifest_path,
        )

    def _fetch_archive(self) -> bool:
        if self._workspace.has_compressed_archive() or self._workspace.has_decompressed_archive():
            _LOGGER.info("archive_fetch_skipped", period=self._period.label)
            self._stage = PeriodStage.ARCHIVE_FETCHED
            return False
        url = build_archive_url(self._config, self._period)
        _LOGGER.info(
            "archive_fetch_started",
            period=self._period.label,
            url=url,
            path=str(self._workspace.compressed_path),
        )
        self._fetcher(url, self._workspace.compressed_path)
        self._stage = PeriodStage.ARCHIVE_FETCHED
        _LOGGER.info("archive_fetched", period=self._period.label)
        return True

    def _decompress_archive(self) -> bool:
        if self._workspace.has_decompressed_archive():
            _LOGGER.info("archive_decompress_skipped", period=self._period.label)
            self._stage = PeriodStage.ARCHIVE_DECOMPRESSED
            return False
        self._decompressor(self._workspace.compressed_path, self._workspace.decompressed_path)
        self._stage = PeriodStage.ARCHIVE_DECOMPRESSED
        _LOGGER.info(
            "archive_decompressed",
            period=self._period.label,
            path=str(self._workspace.decompressed_path),
        )
        return True

    def _parse_archive(self) -> ArchiveParseResult:
        removed_count = self._workspace.clear_incomplete_emission()
        if removed_count:
            _LOGGER.warning(
                "stale_chunks_removed", period=self._period.label, file_count=removed_count
            )
        parse_result = parse_archive_file(
            self._workspace.decompressed_path,
            self._config.parse_workers,
            self._parse_executor,
        )
        self._stage = PeriodStage.PARSED
        _LOGGER.info(
            "archive_parsed",
            period=self._period.label,
            record_count=len(parse_result.records),
            rejected_count=parse_result.rejected_count,
        )
        return parse_result

    def _emit_chunks(self, parse_result: ArchiveParseResult) -> list[Path]:
        chunk_paths: list[Path] = []
        chunks = chunk_records(parse_result.records, self._config.chunk_size)
        for chunk_index, chunk in enumerate(chunks, 1):
            chunk_path = self._workspace.chunk_path(chunk_index)
            self._chunk_writer(chunk, chunk_path)
            chunk_paths.append(chunk_path)
            _LOGGER.info(
                "chunk_written",
                period=self._period.label,
                chunk_index=chunk_index,
                record_count=len(chunk),
                path=str(chunk_path),
            )
        return chunk_paths

    def _write_manifest(
        self,
        parse_result: ArchiveParseResult,
        chunk_paths: list[Path],
    ) -> Path:
        manifest = PeriodManifest(
            period=self._period.label,
            record_count=len(parse_result.records),
            rejected_count=parse_result.rejected_count,
            chunk_files=tuple(path.name for path in chunk_paths),
            generated_at=datetime.now(timezone.utc),
        )
        write_period_manifest(self._workspace.manifest_path, manifest)
        self._stage = PeriodStage.EMITTED
        return self._workspace.manifest_path

    def _load_completed_result(
        self, fetched: bool, decompressed: bool
    ) -> PeriodResult | None:
        """Return the recorded outcome, or discard a manifest whose chunks are gone."""
        manifest = read_period_manifest(self._workspace.manifest_path)
        chunk_paths = tuple(self._workspace.directory / name for name in manifest.chunk_files)
        missing_files = [path.name for path in chunk_paths if not path.is_file()]
        if missing_files:
            _LOGGER.warning(
                "manifest_chunks_missing",
                period=self._period.label,
                missing_files=missing_files,
            )
            self._workspace.discard_manifest()
            return None
        self._stage = PeriodStage.EMITTED
        _LOGGER.info(
            "period_emit_skipped",
            period=self._period.label,
            record_count=manifest.record_count,
            chunk_count=len(manifest.chunk_files),
        )
        return PeriodResult(
            period=self._period,
            stage=self._stage,
            fetched=fetched,
            decompressed=decompressed,
            emitted=False,
            record_count=manifest.record_count,
            rejected_count=manifest.rejected_count,
            chunk_paths=chunk_paths,
            manifest_path=self._workspace.manifest_path,
        )

    def _download(self, url: str, destination: Path) -> int:
        return download_archive(url, destination, self._config.fetch_timeout_seconds)


def run_period(
    period: Period,
    config: GambitConfig,
    fetcher: ArchiveFetcher | None = None,
    decompressor: ArchiveDecompressor | None = None,
    chunk_writer: ChunkWriter | None = None,
    parse_executor: Executor | None = None,
) -> PeriodResult:
    """Run the ingest pipeline for one period.

    Args:
        period: Period to process.
        config: Runtime configuration.
        fetcher: Optional replacement for the HTTP download step.
        decompressor: Optional replacement for zstandard decoding.
        chunk_writer: Optional replacement for the Parquet chunk writer.
        parse_executor: Optional pool shared with other periods; without it a
            pool sized to ``config.parse_workers`` is created for this period.

    Returns:
        Outcome of the run, including which stages actually executed.

    Raises:
        GambitFetchError: If the archive download fails.
        GambitCodecError: If the archive cannot be decompressed.
        GambitStoreError: If chunks or the manifest cannot be written.
    """
    runner = PeriodPipelineRunner(
        period, config, fetcher, decompressor, chunk_writer, parse_executor
    )
    return runner.run()


def _log_period_completion(
    period: Period,
    parse_result: ArchiveParseResult,
    chunk_paths: list[Path],
) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "period_completed",
        period=period.label,
        block_count=parse_result.block_count,
        record_count=len(parse_result.records),
        rejected_count=parse_result.rejected_count,
        chunk_count=len(chunk_paths),
    )
