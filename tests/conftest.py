"""Root-level pytest configuration and fixtures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import piexif
import pytest
from PIL import Image

# Set up a logger for this module
logger = logging.getLogger(__name__)

JpegFactory = Callable[..., Path]


def _dms(value: float) -> tuple[tuple[int, int], tuple[int, int], tuple[int, int]]:
    value = abs(value)
    deg = int(value)
    minutes_float = (value - deg) * 60
    minutes = int(minutes_float)
    seconds = round((minutes_float - minutes) * 60 * 10000)
    return ((deg, 1), (minutes, 1), (seconds, 10000))


def build_gps_ifd(
    date: str | None = "2023:05:01",
    time: tuple[int, int, int] | None = (12, 30, 0),
    position: tuple[float, float] | None = None,
) -> dict[int, Any]:
    gps: dict[int, Any] = {}
    if date is not None:
        gps[piexif.GPSIFD.GPSDateStamp] = date.encode("ascii")
    if time is not None:
        gps[piexif.GPSIFD.GPSTimeStamp] = tuple((part, 1) for part in time)
    if position is not None:
        lat, lon = position
        gps[piexif.GPSIFD.GPSLatitudeRef] = b"N" if lat >= 0 else b"S"
        gps[piexif.GPSIFD.GPSLatitude] = _dms(lat)
        gps[piexif.GPSIFD.GPSLongitudeRef] = b"E" if lon >= 0 else b"W"
        gps[piexif.GPSIFD.GPSLongitude] = _dms(lon)
    return gps


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Provides the absolute path to the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def make_jpeg() -> JpegFactory:
    """Write a small JPEG with the given GPS tags and return its path.

    ``make_jpeg(path, date=..., time=..., position=...)``; pass ``None`` to leave
    a tag out, or ``exif=False`` to write a JPEG with no EXIF segment at all.
    """

    def factory(
        path: Path,
        date: str | None = "2023:05:01",
        time: tuple[int, int, int] | None = (12, 30, 0),
        position: tuple[float, float] | None = None,
        exif: bool = True,
    ) -> Path:
        image = Image.new("RGB", (8, 8), color=(200, 120, 40))
        if exif:
            exif_dict = {
                "0th": {piexif.ImageIFD.Make: b"geostamp-tests"},
                "Exif": {piexif.ExifIFD.DateTimeOriginal: b"2000:01:01 00:00:00"},
                "GPS": build_gps_ifd(date, time, position),
            }
            image.save(path, "JPEG", exif=piexif.dump(exif_dict))
        else:
            image.save(path, "JPEG")
        return path

    return factory


def read_date_time_original(path: Path) -> bytes | None:
    return piexif.load(str(path))["Exif"].get(piexif.ExifIFD.DateTimeOriginal)
