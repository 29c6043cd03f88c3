"""Pytest configuration for repository test runs."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import sys

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def gambit_config(tmp_path: Path):
    """Config rooted in a temporary directory with in-process parsing."""
    from core.config import GambitConfig

    return replace(GambitConfig.from_env(), data_root=tmp_path, parse_workers=1)


@pytest.fixture
def valid_headers() -> dict[str, str]:
    """Complete header mapping for one rated bullet game."""
    return {
        "Event": "Rated Bullet game",
        "Site": "https://lichess.org/j1dkb5dw",
        "White": "BFG9k",
        "Black": "mamalak",
        "Result": "0-1",
        "UTCDate": "2014.06.30",
        "UTCTime": "22:00:11",
        "WhiteElo": "1525",
        "BlackElo": "1458",
        "ECO": "C20",
        "Opening": "King's Pawn Opening: 2.b3",
        "TimeControl": "60+1",
        "Termination": "Time forfeit",
    }
