"""Unit tests for remote archive download."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest
import requests

from core.errors import GambitFetchError
from core.types import Period
from ingest.archive_fetch import build_archive_url, download_archive


class _FakeResponse:
    def __init__(self, status_code: int, blocks: list[bytes], error: Exception | None = None):
        self.status_code = status_code
        self.ok = status_code < 400
        self._blocks = blocks
        self._error = error

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def iter_content(self, chunk_size: int):
        for block in self._blocks:
            yield block
        if self._error is not None:
            raise self._error


class _FakeSession:
    def __init__(self, response: _FakeResponse) -> None:
        self.response = response
        self.calls: list[tuple[str, dict[str, object]]] = []

    def get(self, url: str, **kwargs: object) -> _FakeResponse:
        self.calls.append((url, kwargs))
        return self.response


def test_build_archive_url_uses_dataset_and_label(gambit_config) -> None:
    """URLs should be <host>/<dataset>_<YYYY-MM>.pgn.zst."""
    config = replace(gambit_config, archive_host="https://host.test", dataset_name="games")

    assert build_archive_url(config, Period(2014, 6)) == "https://host.test/games_2014-06.pgn.zst"


def test_download_archive_streams_body(tmp_path: Path) -> None:
    """A successful response should be written in full and moved into place."""
    session = _FakeSession(_FakeResponse(200, [b"abc", b"", b"def"]))
    destination = tmp_path / "2014-06.pgn.zst"

    byte_count = download_archive("https://host.test/a.zst", destination, 30.0, session)

    assert byte_count == 6
    assert destination.read_bytes() == b"abcdef"
    assert not (tmp_path / "2014-06.pgn.zst.part").exists()
    assert session.calls == [("https://host.test/a.zst", {"stream": True, "timeout": 30.0})]


def test_download_archive_rejects_error_status(tmp_path: Path) -> None:
    """Non-success statuses should raise a fetch error and leave no file."""
    session = _FakeSession(_FakeResponse(404, [b"not found"]))
    destination = tmp_path / "2014-06.pgn.zst"

    with pytest.raises(GambitFetchError, match="404"):
        download_archive("https://host.test/a.zst", destination, session=session)

    assert list(tmp_path.iterdir()) == []


def test_download_archive_cleans_up_interrupted_transfer(tmp_path: Path) -> None:
    """Transport failures mid-body should remove the partial file."""
    error = requests.ConnectionError("connection reset")
    session = _FakeSession(_FakeResponse(200, [b"abc"], error=error))
    destination = tmp_path / "2014-06.pgn.zst"

    with pytest.raises(GambitFetchError, match="connection reset"):
        download_archive("https://host.test/a.zst", destination, session=session)

    assert list(tmp_path.iterdir()) == []
