"""Canonical enumerations for game header values.

This module maps header tokens onto the value types in ``core.types``:
winner, termination reason, speed class, and time control. Every parser
is a lowercase table lookup that either returns a typed value or raises
``GambitParseError``.
"""

from __future__ import annotations

import re
from typing import Mapping, TypeVar

from core.errors import GambitParseError
from core.types import Speed, SpeedClass, Termination, TimeControl, UnknownSpeed, Winner

_UNKNOWN_SPEED_PATTERN = re.compile(r"^unknown \((.*)\)$", re.IGNORECASE | re.DOTALL)
_T = TypeVar("_T")

_WINNER_SPELLINGS = {
    "white": Winner.WHITE,
    "black": Winner.BLACK,
}
_TERMINATION_SPELLINGS = {
    "normal": Termination.NORMAL,
    "time forfeit": Termination.TIME_FORFEIT,
    "time": Termination.TIME_FORFEIT,
}
_SPEED_SPELLINGS = {
    "bullet": SpeedClass.BULLET,
    "blitz": SpeedClass.BLITZ,
    "rapid": SpeedClass.RAPID,
    "classical": SpeedClass.CLASSICAL,
}
# Checked in order: the first keyword contained in the event text wins.
_EVENT_SPEED_PRIORITY = (
    ("bullet", SpeedClass.BULLET),
    ("blitz", SpeedClass.BLITZ),
    ("rapid", SpeedClass.RAPID),
    ("classical", SpeedClass.CLASSICAL),
)
_RESULT_WINNERS: dict[str, Winner | None] = {
    "1-0": Winner.WHITE,
    "0-1": Winner.BLACK,
    "1/2-1/2": None,
}


def parse_winner(token: str) -> Winner:
    """Parse a winner name such as ``white`` or ``Black``."""
    return _lookup(_WINNER_SPELLINGS, token, "winner")


def parse_termination(token: str) -> Termination:
    """Parse a termination reason.

    ``time`` and ``time forfeit`` both map to ``Termination.TIME_FORFEIT``.
    """
    return _lookup(_TERMINATION_SPELLINGS, token, "termination")


def parse_speed_class(token: str) -> Speed:
    """Parse a speed class name or its ``Unknown (<event>)`` display form."""
    unknown_match = _UNKNOWN_SPEED_PATTERN.match(token.strip())
    if unknown_match:
        return UnknownSpeed(event=unknown_match.group(1))
    return _lookup(_SPEED_SPELLINGS, token, "speed class")


def format_winner(value: Winner) -> str:
    return value.value


def format_termination(value: Termination) -> str:
    return value.value


def format_speed_class(value: Speed) -> str:
    return str(value)


def format_time_control(value: TimeControl) -> str:
    return str(value)


def speed_class_from_event(event: str) -> Speed:
    """Derive the speed class from free-text event description.

    Args:
        event: Event header value, e.g. ``Rated Bullet game``.

    Returns:
        The first matching speed class in bullet, blitz, rapid, classical
        order, or ``UnknownSpeed`` carrying the event text.
    """
    lowered_event = event.lower()
    for keyword, speed_class in _EVENT_SPEED_PRIORITY:
        if keyword in lowered_event:
            return speed_class
    return UnknownSpeed(event=event)


def winner_from_result(result: str) -> Winner | None:
    """Map a result token onto the winning side.

    Draws and unrecognized tokens both yield ``None``.
    """
    return _RESULT_WINNERS.get(result)


def _lookup(table: Mapping[str, _T], token: str, kind: str) -> _T:
    """Case-insensitive lookup in a fixed spelling table."""
    value = table.get(token.strip().lower())
    if value is None:
        raise GambitParseError(
            f"Invalid {kind} '{token}': expected one of {sorted(table)}."
        )
    return value
