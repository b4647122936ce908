from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from geostamp.exceptions import MetadataPersistError, MetadataReadError, MetadataWriteError
from geostamp.services.interfaces import GPS_DATE_STAMP_TAG, GPS_TIME_STAMP_TAG
from geostamp.types import Coordinate


@pytest.fixture(scope="session", autouse=True)
def _disable_network_for_unit_tests() -> None:
    """Block real sockets for unit tests; allow Unix sockets for pytest internals."""
    from pytest_socket import disable_socket

    disable_socket(allow_unix_socket=True)


@pytest.fixture
def temp_folder(tmp_path: Path) -> Iterator[Path]:
    """Input folder for a test run."""
    folder = tmp_path / "input"
    folder.mkdir()
    yield folder


class FakeMetadata:
    """In-memory MetadataHandle that records every call."""

    def __init__(
        self,
        gateway: "FakeGateway",
        path: Path,
        tags: dict[str, str],
        coordinates: Coordinate | None,
    ) -> None:
        self._gateway = gateway
        self.path = path
        self.tags = dict(tags)
        self.coordinates = coordinates

    def read_tag_literal(self, tag: str) -> str | None:
        self._gateway.calls.append(("read_literal", self.path.name, tag))
        return self.tags.get(tag)

    def read_tag_interpreted(self, tag: str) -> str | None:
        self._gateway.calls.append(("read_interpreted", self.path.name, tag))
        return self.tags.get(tag)

    def write_tag(self, tag: str, value: str) -> None:
        self._gateway.calls.append(("write", self.path.name, tag))
        if self.path.name in self._gateway.reject_writes:
            raise MetadataWriteError("write rejected")
        self.tags[tag] = value

    def read_gps_coordinates(self) -> Coordinate | None:
        self._gateway.calls.append(("coordinates", self.path.name))
        return self.coordinates

    def persist(self) -> None:
        self._gateway.calls.append(("persist", self.path.name))
        if self.path.name in self._gateway.fail_persist:
            raise MetadataPersistError("disk full")
        self._gateway.persisted[self.path.name] = dict(self.tags)


class FakeGateway:
    """MetadataGateway backed by a dict of filename -> (tags, coordinates)."""

    def __init__(self) -> None:
        self.files: dict[str, tuple[dict[str, str], Coordinate | None]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.persisted: dict[str, dict[str, str]] = {}
        self.reject_writes: set[str] = set()
        self.fail_persist: set[str] = set()
        self.explode_on: set[str] = set()

    def add(
        self,
        name: str,
        date: str | None = "2023:05:01",
        time: str | None = "12:30:00",
        coordinates: Coordinate | None = None,
    ) -> None:
        tags: dict[str, str] = {}
        if date is not None:
            tags[GPS_DATE_STAMP_TAG] = date
        if time is not None:
            tags[GPS_TIME_STAMP_TAG] = time
        self.files[name] = (tags, coordinates)

    def open(self, path: Path) -> FakeMetadata:
        path = Path(path)
        self.calls.append(("open", path.name))
        if path.name in self.explode_on:
            raise RuntimeError("gateway bug")
        if path.name not in self.files:
            raise MetadataReadError("not an image")
        tags, coordinates = self.files[path.name]
        return FakeMetadata(self, path, tags, coordinates)

    def calls_for(self, name: str) -> list[str]:
        return [call[0] for call in self.calls if call[1] == name]


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()
