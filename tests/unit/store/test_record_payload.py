"""Unit tests for game record row serialization."""

from __future__ import annotations

from datetime import date, time

from parse.header_record import record_from_headers
from store.record_payload import game_record_from_row, game_record_to_row


def test_row_renders_enumerations_as_display_strings(valid_headers: dict[str, str]) -> None:
    """Rows should carry display strings and raw date/time values."""
    row = game_record_to_row(record_from_headers(valid_headers))

    assert row["speed"] == "Bullet"
    assert row["time_control"] == "60+1"
    assert row["winner"] == "Black"
    assert row["termination"] == "Time forfeit"
    assert row["date"] == date(2014, 6, 30)
    assert row["time"] == time(22, 0, 11)


def test_draw_and_unknown_speed_survive_row_form(valid_headers: dict[str, str]) -> None:
    """Absent winners and unknown speeds should rebuild unchanged."""
    valid_headers["Result"] = "1/2-1/2"
    valid_headers["Event"] = "Rated Correspondence game"
    record = record_from_headers(valid_headers)

    row = game_record_to_row(record)

    assert row["winner"] is None
    assert row["speed"] == "Unknown (Rated Correspondence game)"
    assert game_record_from_row(row) == record
