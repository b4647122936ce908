"""Service interfaces for the photo processor using structural typing."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from geostamp.types import Coordinate

# Tag identifiers, named after their Exiv2 keys
GPS_DATE_STAMP_TAG = "Exif.GPSInfo.GPSDateStamp"
GPS_TIME_STAMP_TAG = "Exif.GPSInfo.GPSTimeStamp"
DATE_TIME_ORIGINAL_TAG = "Exif.Photo.DateTimeOriginal"


@runtime_checkable
class MetadataHandle(Protocol):
    """Metadata of one opened file. Owned by a single worker."""

    def read_tag_literal(self, tag: str) -> str | None:
        """Return the raw string value of a tag, or None if absent."""
        ...

    def read_tag_interpreted(self, tag: str) -> str | None:
        """Return the human-formatted value of a tag, or None if absent."""
        ...

    def write_tag(self, tag: str, value: str) -> None:
        """Set a tag in memory. Raises MetadataWriteError when rejected."""
        ...

    def read_gps_coordinates(self) -> Coordinate | None:
        """Return the GPS position, or None if absent or unusable."""
        ...

    def persist(self) -> None:
        """Write the in-memory metadata back to the file."""
        ...


@runtime_checkable
class MetadataGateway(Protocol):
    """Service for opening image metadata."""

    def open(self, path: Path) -> MetadataHandle:
        """Open metadata for ``path``. Raises MetadataReadError on failure."""
        ...


@runtime_checkable
class FileMover(Protocol):
    """Service for moving files."""

    def move(self, source: Path, destination_dir: Path) -> Path:
        """Move ``source`` into ``destination_dir`` and return the new path."""
        ...
