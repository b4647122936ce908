"""Integration test configuration and shared fixtures."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from tests.conftest import JpegFactory

LOGGER = logging.getLogger(__name__)

QUIET_LOGGERS = ("geostamp.components", "geostamp.run_config", "geostamp.services")

TALLINN_OLD_TOWN = (59.4370, 24.7536)
PARIS = (48.8566, 2.3522)


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every CLI test from an empty folder with no GEOSTAMP_* variables.

    The CLI reconfigures the root logger on each invocation, so the original
    handlers are put back afterwards.
    """
    for name in (
        "GEOSTAMP_CONFIG",
        "GEOSTAMP_INPUT_DIR",
        "GEOSTAMP_FAILED_DIR",
        "GEOSTAMP_USE_GPS_TIMESTAMPS",
        "GEOSTAMP_WORKERS",
        "APP_LOG_DIR",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_config(tmp_path: Path):
    """Write ``geostamp.json`` into the test folder and return its path."""

    def factory(data: dict[str, Any], name: str = "geostamp.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return factory


@pytest.fixture
def photo_library(tmp_path: Path, make_jpeg: JpegFactory) -> Path:
    """Create ``data/`` with a mix of good, private and broken images."""
    folder = tmp_path / "data"
    folder.mkdir()
    make_jpeg(folder / "paris.jpg", date="2023:05:01", time=(12, 30, 0), position=PARIS)
    make_jpeg(folder / "no_position.jpg", date="2023:06:02", time=(8, 0, 5))
    make_jpeg(folder / "home.jpg", position=TALLINN_OLD_TOWN)
    make_jpeg(folder / "no_date.jpg", date=None, position=PARIS)
    (folder / "notes.txt").write_text("not an image", encoding="utf-8")
    return folder
