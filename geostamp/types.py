"""Shared type definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0


class ErrorKind(str, Enum):
    """Reasons a single file can fail processing."""

    METADATA_UNREADABLE = "metadata_unreadable"
    MISSING_GPS_DATE = "missing_gps_date"
    MISSING_GPS_TIME = "missing_gps_time"
    MISSING_COORDINATES = "missing_coordinates"
    TIMESTAMP_WRITE_FAILED = "timestamp_write_failed"
    INSIDE_PRIVACY_ZONE = "inside_privacy_zone"
    PERSIST_FAILED = "persist_failed"
    UNEXPECTED_ERROR = "unexpected_error"


_REASONS: dict[ErrorKind, str] = {
    ErrorKind.METADATA_UNREADABLE: "Could not read image metadata",
    ErrorKind.MISSING_GPS_DATE: "GPS date stamp is missing",
    ErrorKind.MISSING_GPS_TIME: "GPS time stamp is missing",
    ErrorKind.MISSING_COORDINATES: "GPS coordinates are missing",
    ErrorKind.TIMESTAMP_WRITE_FAILED: "Could not write the corrected timestamp",
    ErrorKind.INSIDE_PRIVACY_ZONE: "Image was taken inside privacy zone",
    ErrorKind.PERSIST_FAILED: "Could not save metadata to file",
    ErrorKind.UNEXPECTED_ERROR: "Unexpected error",
}


@dataclass(frozen=True, slots=True)
class FileOutcome:
    """Result captured for each input file.

    ``error`` is None for a successful file. ``detail`` carries the zone name for
    privacy zone rejections and the gateway message for metadata failures.
    """

    path: Path
    error: ErrorKind | None = None
    detail: str | None = None
    quarantined_to: Path | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        return "completed" if self.error is None else "failed"

    @property
    def reason(self) -> str:
        """Human-readable failure reason (empty for successes)."""
        if self.error is None:
            return ""
        base = _REASONS[self.error]
        if self.error is ErrorKind.INSIDE_PRIVACY_ZONE:
            return f"{base} '{self.detail}'"
        if self.detail:
            return f"{base}: {self.detail}"
        return base

    def describe(self) -> str:
        """Diagnostic line ``<path>: <reason>[ -> <new path>]``."""
        line = f"{self.path}: {self.reason}"
        if self.quarantined_to is not None:
            line = f"{line} -> {self.quarantined_to}"
        return line


@dataclass(slots=True)
class BatchSummary:
    """Aggregate counts for one run."""

    files_found: int = 0
    succeeded: int = 0
    failed: int = 0
    outcomes: list[FileOutcome] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.succeeded:
            self.succeeded += 1
        else:
            self.failed += 1

    @property
    def failures(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]
