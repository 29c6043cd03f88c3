"""Shared row serialization for GameRecord payloads.

This module centralizes the flat row form of a game record.
It is reused by the Parquet chunk writer and reader.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.types import GameRecord, TimeControl
from parse.game_enums import (
    format_speed_class,
    format_termination,
    format_time_control,
    format_winner,
    parse_speed_class,
    parse_termination,
    parse_winner,
)


def game_record_to_row(record: GameRecord) -> dict[str, Any]:
    """Flatten a GameRecord into a column-name keyed row.

    Args:
        record: Game record instance.

    Returns:
        Row with enumerations rendered as display strings.
    """
    return {
        "game_id": record.game_id,
        "rated": record.rated,
        "url": record.url,
        "speed": format_speed_class(record.speed),
        "time_control": format_time_control(record.time_control),
        "white_player_name": record.white_player_name,
        "white_player_elo": record.white_player_elo,
        "black_player_name": record.black_player_name,
        "black_player_elo": record.black_player_elo,
        "rating_diff": record.rating_diff,
        "winner": format_winner(record.winner) if record.winner else None,
        "termination": format_termination(record.termination),
        "date": record.date,
        "time": record.time,
        "opening_name": record.opening_name,
        "opening_eco": record.opening_eco,
    }


def game_record_from_row(row: Mapping[str, Any]) -> GameRecord:
    """Rebuild a GameRecord from its flat row form.

    Args:
        row: Row produced by ``game_record_to_row`` or read back from Parquet.

    Returns:
        Parsed GameRecord.

    Raises:
        GambitParseError: If an enumeration column holds an unknown value.
    """
    winner_value = row.get("winner")
    return GameRecord(
        rated=bool(row["rated"]),
        url=str(row["url"]),
        speed=parse_speed_class(str(row["speed"])),
        time_control=TimeControl.parse(str(row["time_control"])),
        white_player_name=str(row["white_player_name"]),
        white_player_elo=int(row["white_player_elo"]),
        black_player_name=str(row["black_player_name"]),
        black_player_elo=int(row["black_player_elo"]),
        rating_diff=int(row["rating_diff"]),
        winner=parse_winner(str(winner_value)) if winner_value else None,
        termination=parse_termination(str(row["termination"])),
        date=row.get("date"),
        time=row.get("time"),
        opening_name=str(row["opening_name"]),
        opening_eco=str(row["opening_eco"]),
        game_id=str(row["game_id"]),
    )
