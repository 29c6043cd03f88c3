"""Unit tests for the monthly period type."""

from __future__ import annotations

import pytest

from core.errors import GambitConfigError
from core.types import Period


def test_period_parse_and_label() -> None:
    """Labels should parse into periods and render zero-padded."""
    period = Period.parse("2014-6")

    assert period == Period(2014, 6)
    assert period.label == "2014-06"
    assert str(period) == "2014-06"


def test_period_next_rolls_over_year() -> None:
    """December should advance to January of the next year."""
    assert Period(2013, 12).next() == Period(2014, 1)
    assert Period(2014, 1).next() == Period(2014, 2)


def test_periods_order_chronologically() -> None:
    """Periods should compare by year, then month."""
    assert Period(2013, 12) < Period(2014, 1) < Period(2014, 11)


@pytest.mark.parametrize("label", ["2014", "2014/06", "14-06", "2014-13", "2014-00", "june"])
def test_period_parse_rejects_invalid_labels(label: str) -> None:
    """Malformed labels and out-of-range months should raise config errors."""
    with pytest.raises(GambitConfigError):
        Period.parse(label)
