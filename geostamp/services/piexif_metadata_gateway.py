"""Metadata gateway backed by piexif.

piexif reads EXIF from JPEG, TIFF and WebP files and can write it back into
JPEG and WebP files. Tag identifiers use Exiv2 key names so the processor
stays independent of piexif's IFD/tag numbering.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import piexif

from geostamp.exceptions import MetadataError, MetadataPersistError, MetadataReadError, MetadataWriteError
from geostamp.services.interfaces import DATE_TIME_ORIGINAL_TAG, GPS_DATE_STAMP_TAG, GPS_TIME_STAMP_TAG
from geostamp.types import Coordinate

LOGGER = logging.getLogger(__name__)

# Exiv2 key -> (piexif IFD name, tag number)
_TAGS: dict[str, tuple[str, int]] = {
    GPS_DATE_STAMP_TAG: ("GPS", piexif.GPSIFD.GPSDateStamp),
    GPS_TIME_STAMP_TAG: ("GPS", piexif.GPSIFD.GPSTimeStamp),
    DATE_TIME_ORIGINAL_TAG: ("Exif", piexif.ExifIFD.DateTimeOriginal),
}


def _lookup(tag: str, error: type[MetadataError]) -> tuple[str, int]:
    try:
        return _TAGS[tag]
    except KeyError:
        raise error(f"Unsupported tag: {tag}") from None


def _decode_ascii(value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    return str(value).rstrip("\x00").strip()


def _rational_to_float(value: Any) -> float | None:
    """Convert a piexif rational ``(num, den)`` (or plain number) to float."""
    if isinstance(value, (tuple, list)) and len(value) == 2:
        num, den = value
        if not den:
            return None
        return float(num) / float(den)
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _dms_to_decimal(dms: Any, ref: Any) -> float | None:
    if not isinstance(dms, (tuple, list)) or len(dms) != 3:
        return None
    parts = [_rational_to_float(part) for part in dms]
    if any(part is None for part in parts):
        return None
    deg, minute, sec = parts
    dec = deg + (minute / 60.0) + (sec / 3600.0)
    if _decode_ascii(ref).upper() in ("S", "W"):
        dec = -dec
    return dec


def _format_gps_time(value: Any) -> str | None:
    """Interpret GPSTimeStamp rationals as ``HH:MM:SS`` (fractional seconds truncated)."""
    if not isinstance(value, (tuple, list)) or len(value) != 3:
        return None
    parts = [_rational_to_float(part) for part in value]
    if any(part is None or not math.isfinite(part) for part in parts):
        return None
    hour, minute, second = (int(part) for part in parts)
    return f"{hour:02d}:{minute:02d}:{second:02d}"


class PiexifMetadata:
    """In-memory EXIF dictionary for one file."""

    def __init__(self, path: Path, exif: dict[str, Any]):
        self.path = path
        self._exif = exif

    def _get(self, tag: str) -> Any:
        ifd, number = _lookup(tag, MetadataReadError)
        return (self._exif.get(ifd) or {}).get(number)

    def read_tag_literal(self, tag: str) -> str | None:
        value = self._get(tag)
        if value is None:
            return None
        text = _decode_ascii(value)
        return text or None

    def read_tag_interpreted(self, tag: str) -> str | None:
        value = self._get(tag)
        if value is None:
            return None
        if tag == GPS_TIME_STAMP_TAG:
            return _format_gps_time(value)
        return self.read_tag_literal(tag)

    def write_tag(self, tag: str, value: str) -> None:
        ifd, number = _lookup(tag, MetadataWriteError)
        try:
            encoded = value.encode("ascii")
        except UnicodeEncodeError as exc:
            raise MetadataWriteError(f"{tag} only accepts ASCII text: {value!r}") from exc
        self._exif.setdefault(ifd, {})[number] = encoded

    def read_gps_coordinates(self) -> Coordinate | None:
        gps = self._exif.get("GPS") or {}
        lat = gps.get(piexif.GPSIFD.GPSLatitude)
        lat_ref = gps.get(piexif.GPSIFD.GPSLatitudeRef)
        lon = gps.get(piexif.GPSIFD.GPSLongitude)
        lon_ref = gps.get(piexif.GPSIFD.GPSLongitudeRef)
        if not (lat and lon and lat_ref and lon_ref):
            return None

        latitude = _dms_to_decimal(lat, lat_ref)
        longitude = _dms_to_decimal(lon, lon_ref)
        if latitude is None or longitude is None:
            return None
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            return None

        coordinate = Coordinate(latitude=latitude, longitude=longitude)
        if not coordinate.is_valid():
            LOGGER.debug("Ignoring out-of-range GPS position %s in %s", coordinate, self.path)
            return None
        return coordinate

    def persist(self) -> None:
        try:
            exif_bytes = piexif.dump(self._exif)
            piexif.insert(exif_bytes, str(self.path))
        except Exception as exc:
            raise MetadataPersistError(f"{type(exc).__name__}: {exc}") from exc


class PiexifMetadataGateway:
    """Concrete MetadataGateway using piexif."""

    def open(self, path: Path) -> PiexifMetadata:
        try:
            exif = piexif.load(str(path))
        except Exception as exc:
            raise MetadataReadError(f"{type(exc).__name__}: {exc}") from exc
        return PiexifMetadata(Path(path), exif)
