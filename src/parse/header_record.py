"""Game record builder for PGN header blocks.

This module extracts ``[Tag "Value"]`` header pairs from one game block
and validates them into an immutable ``GameRecord``. Malformed blocks are
rejected without raising so one bad game never aborts an archive.
"""

from __future__ import annotations

from datetime import date, datetime, time
import re
from typing import Iterable, Mapping
import uuid

from core.constants import (
    MAX_PLAYER_RATING,
    PGN_DATE_FORMAT,
    PGN_TIME_FORMAT,
    REQUIRED_HEADER_TAGS,
    UNKNOWN_DATE_SENTINEL,
    UNKNOWN_TIME_SENTINEL,
)
from core.errors import GambitParseError, GambitRecordError
from core.types import GameRecord, TimeControl
from parse.game_enums import (
    parse_termination,
    speed_class_from_event,
    winner_from_result,
)

_HEADER_LINE_PATTERN = re.compile(r'^\[(\w+)\s+"([^"]+)"\]')
_RATING_PATTERN = re.compile(r"[0-9]+")


def extract_headers(block: str | Iterable[str]) -> dict[str, str]:
    """Collect header tags from a game block.

    Args:
        block: Game text, or its lines. Move text and other lines are ignored.

    Returns:
        Mapping of tag name to value. A repeated tag keeps its last value.
    """
    lines = block.splitlines() if isinstance(block, str) else block
    headers: dict[str, str] = {}
    for line in lines:
        match = _HEADER_LINE_PATTERN.match(line.strip())
        if match:
            headers[match.group(1)] = match.group(2)
    return headers


def build_game_record(block: str) -> GameRecord | None:
    """Build a game record from one block, or ``None`` if it is malformed.

    Args:
        block: Text of one game, headers first.

    Returns:
        The validated record, or ``None`` when a required tag is missing or
        a value fails validation.
    """
    try:
        return record_from_headers(extract_headers(block))
    except GambitParseError:
        return None


def record_from_headers(headers: Mapping[str, str]) -> GameRecord:
    """Validate header values and derive the computed record fields.

    Args:
        headers: Tag to value mapping for one game.

    Returns:
        Immutable record with a freshly minted ``game_id``.

    Raises:
        GambitRecordError: If a required tag is missing or invalid.
    """
    _require_tags(headers)
    event = headers["Event"]
    white_elo = _parse_rating(headers, "WhiteElo")
    black_elo = _parse_rating(headers, "BlackElo")
    try:
        time_control = TimeControl.parse(headers["TimeControl"])
        termination = parse_termination(headers["Termination"])
    except GambitParseError as error:
        raise GambitRecordError(f"Invalid game headers: {error}") from error
    return GameRecord(
        rated="unrated" not in event.lower(),
        url=headers["Site"],
        speed=speed_class_from_event(event),
        time_control=time_control,
        white_player_name=headers["White"],
        white_player_elo=white_elo,
        black_player_name=headers["Black"],
        black_player_elo=black_elo,
        rating_diff=abs(white_elo - black_elo),
        winner=winner_from_result(headers["Result"]),
        termination=termination,
        date=_parse_utc_date(headers["UTCDate"]),
        time=_parse_utc_time(headers["UTCTime"]),
        opening_name=headers["Opening"],
        opening_eco=headers["ECO"],
        game_id=str(uuid.uuid4()),
    )


def _require_tags(headers: Mapping[str, str]) -> None:
    missing_tags = [tag for tag in REQUIRED_HEADER_TAGS if tag not in headers]
    if missing_tags:
        raise GambitRecordError(f"Missing required header tags: {', '.join(missing_tags)}.")


def _parse_rating(headers: Mapping[str, str], tag: str) -> int:
    """Parse a rating tag as a non-negative integer that fits the rating column."""
    raw_value = headers[tag]
    if not _RATING_PATTERN.fullmatch(raw_value):
        raise GambitRecordError(
            f"Invalid {tag} '{raw_value}': expected a non-negative integer."
        )
    rating = int(raw_value)
    if rating > MAX_PLAYER_RATING:
        raise GambitRecordError(
            f"Invalid {tag} '{raw_value}': expected a value <= {MAX_PLAYER_RATING}."
        )
    return rating


def _parse_utc_date(raw_value: str) -> date | None:
    """Parse a UTCDate tag; the unknown sentinel maps to ``None``.

    A value that is neither the sentinel nor a valid date rejects the record.
    """
    if raw_value == UNKNOWN_DATE_SENTINEL:
        return None
    try:
        return datetime.strptime(raw_value, PGN_DATE_FORMAT).date()
    except ValueError as error:
        raise GambitRecordError(f"Invalid UTCDate '{raw_value}': {error}.") from error


def _parse_utc_time(raw_value: str) -> time | None:
    if raw_value == UNKNOWN_TIME_SENTINEL:
        return None
    try:
        return datetime.strptime(raw_value, PGN_TIME_FORMAT).time()
    except ValueError as error:
        raise GambitRecordError(f"Invalid UTCTime '{raw_value}': {error}.") from error
