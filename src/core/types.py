"""Shared typed models.

This module defines immutable data models used by the parse, ingest,
and store layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as CalendarDate, datetime, time as ClockTime
from enum import Enum
from pathlib import Path
import re
from typing import Union

from core.errors import GambitConfigError, GambitParseError

_PERIOD_LABEL_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")
_TIME_CONTROL_PART_PATTERN = re.compile(r"[0-9]+")


class Winner(Enum):
    """Side that won a decisive game."""

    WHITE = "White"
    BLACK = "Black"

    def __str__(self) -> str:
        return self.value


class Termination(Enum):
    """Reason a game ended."""

    NORMAL = "Normal"
    TIME_FORFEIT = "Time forfeit"

    def __str__(self) -> str:
        return self.value


class SpeedClass(Enum):
    """Coarse game-pace category."""

    BULLET = "Bullet"
    BLITZ = "Blitz"
    RAPID = "Rapid"
    CLASSICAL = "Classical"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnknownSpeed:
    """Speed class for event text that names no known pace.

    Attributes:
        event: Original event text, kept verbatim.
    """

    event: str

    def __str__(self) -> str:
        return f"Unknown ({self.event})"


Speed = Union[SpeedClass, UnknownSpeed]


@dataclass(frozen=True)
class TimeControl:
    """Base time in minutes plus per-move increment in seconds."""

    minutes: int
    increment: int

    def __post_init__(self) -> None:
        if self.minutes < 0 or self.increment < 0:
            raise GambitParseError(
                f"Invalid time control {self.minutes}+{self.increment}: "
                "expected non-negative minutes and increment."
            )

    def __str__(self) -> str:
        return f"{self.minutes}+{self.increment}"

    @classmethod
    def parse(cls, text: str) -> "TimeControl":
        """Parse ``"<minutes>+<increment>"`` into a time control.

        Args:
            text: Raw TimeControl header value.

        Returns:
            Parsed time control.

        Raises:
            GambitParseError: If the value is not two ``+``-separated integers.
        """
        parts = text.split("+")
        if len(parts) != 2 or not all(
            _TIME_CONTROL_PART_PATTERN.fullmatch(part) for part in parts
        ):
            raise GambitParseError(
                f"Invalid time control '{text}': expected '<minutes>+<increment>'."
            )
        return cls(minutes=int(parts[0]), increment=int(parts[1]))


@dataclass(frozen=True, order=True)
class Period:
    """One monthly archive unit.

    Attributes:
        year: Four-digit calendar year.
        month: Calendar month in [1, 12].
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise GambitConfigError(
                f"Invalid period month {self.month} for year {self.year}: "
                "expected a value between 1 and 12."
            )

    @property
    def label(self) -> str:
        """Return the ``YYYY-MM`` label used in file names and logs."""
        return f"{self.year}-{self.month:02d}"

    def next(self) -> "Period":
        """Return the following calendar month."""
        if self.month == 12:
            return Period(year=self.year + 1, month=1)
        return Period(year=self.year, month=self.month + 1)

    def __str__(self) -> str:
        return self.label

    @classmethod
    def parse(cls, text: str) -> "Period":
        """Parse a ``YYYY-MM`` label.

        Raises:
            GambitConfigError: If the label is malformed.
        """
        match = _PERIOD_LABEL_PATTERN.match(text.strip())
        if match is None:
            raise GambitConfigError(
                f"Invalid period '{text}': expected YYYY-MM, for example 2014-06."
            )
        return cls(year=int(match.group(1)), month=int(match.group(2)))


@dataclass(frozen=True)
class GameRecord:
    """Typed header metadata for one game.

    Attributes:
        rated: False when the event text mentions an unrated game.
        url: Site header, the game's source URL.
        speed: Speed class derived from the event text.
        time_control: Base minutes and increment seconds.
        white_player_name: White player's account name.
        white_player_elo: White player's rating.
        black_player_name: Black player's account name.
        black_player_elo: Black player's rating.
        rating_diff: Absolute difference of the two ratings.
        winner: Winning side, ``None`` for draws and unknown results.
        termination: Termination reason.
        date: UTC date, ``None`` when the archive marks it unknown.
        time: UTC time of day, ``None`` when the archive marks it unknown.
        opening_name: Opening name header.
        opening_eco: ECO classification code.
        game_id: Random identifier minted when the record was built.
    """

    rated: bool
    url: str
    speed: Speed
    time_control: TimeControl
    white_player_name: str
    white_player_elo: int
    black_player_name: str
    black_player_elo: int
    rating_diff: int
    winner: Winner | None
    termination: Termination
    date: CalendarDate | None
    time: ClockTime | None
    opening_name: str
    opening_eco: str
    game_id: str


@dataclass(frozen=True)
class ArchiveParseResult:
    """Outcome of parsing every block of one archive.

    Attributes:
        records: Successfully built records, order not guaranteed.
        rejected_count: Number of blocks that produced no record.
    """

    records: tuple[GameRecord, ...]
    rejected_count: int

    @property
    def block_count(self) -> int:
        return len(self.records) + self.rejected_count


class PeriodStage(Enum):
    """Ordered stages of one period pipeline run."""

    WORKSPACE_READY = "workspace_ready"
    ARCHIVE_FETCHED = "archive_fetched"
    ARCHIVE_DECOMPRESSED = "archive_decompressed"
    PARSED = "parsed"
    EMITTED = "emitted"


@dataclass(frozen=True)
class PeriodManifest:
    """Completion record written after all chunks of a period.

    Attributes:
        period: Period label.
        record_count: Total records across chunks.
        rejected_count: Blocks dropped by the record builder.
        chunk_files: Chunk file names in emission order.
        generated_at: UTC completion timestamp.
    """

    period: str
    record_count: int
    rejected_count: int
    chunk_files: tuple[str, ...]
    generated_at: datetime


@dataclass(frozen=True)
class PeriodResult:
    """Outcome of a successful period pipeline run.

    Attributes:
        period: Processed period.
        stage: Last stage reached.
        fetched: Whether the archive was downloaded in this run.
        decompressed: Whether the archive was decompressed in this run.
        emitted: Whether chunks were written in this run.
        record_count: Records in the period's chunks.
        rejected_count: Blocks dropped by the record builder.
        chunk_paths: Chunk files in emission order.
        manifest_path: Period manifest file.
    """

    period: Period
    stage: PeriodStage
    fetched: bool
    decompressed: bool
    emitted: bool
    record_count: int
    rejected_count: int
    chunk_paths: tuple[Path, ...]
    manifest_path: Path


@dataclass(frozen=True)
class PeriodFailure:
    """A period that ended in an error.

    Attributes:
        period: Failed period.
        error_type: Exception class name.
        message: Exception message.
    """

    period: Period
    error_type: str
    message: str


@dataclass(frozen=True)
class FleetReport:
    """Terminal state of every period launched by the orchestrator."""

    succeeded: tuple[PeriodResult, ...] = field(default_factory=tuple)
    failed: tuple[PeriodFailure, ...] = field(default_factory=tuple)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed
