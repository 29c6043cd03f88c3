"""Period enumeration under inclusion bounds."""

from __future__ import annotations

from typing import Iterable

from core.errors import GambitConfigError
from core.types import Period


def enumerate_periods(start: Period, end: Period) -> list[Period]:
    """List every period from ``start`` through ``end`` inclusive.

    Args:
        start: First period to include.
        end: Last period to include.

    Returns:
        Periods in chronological order.

    Raises:
        GambitConfigError: If ``end`` precedes ``start``.
    """
    if end < start:
        raise GambitConfigError(
            f"Invalid period range {start.label}..{end.label}: "
            "the end period must not precede the start period."
        )
    periods: list[Period] = []
    current = start
    while current <= end:
        periods.append(current)
        current = current.next()
    return periods


def unique_periods(periods: Iterable[Period]) -> list[Period]:
    """Deduplicate periods and return them in chronological order."""
    return sorted(set(periods))
