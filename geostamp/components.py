"""Components used by the batch processor: scanning, per-file processing, quarantine."""

import logging
from pathlib import Path

from geostamp.exceptions import FailedFolderError, FileMoveError, InputFolderError, MetadataError
from geostamp.geo import find_privacy_zone
from geostamp.run_config import ProcessingOptions
from geostamp.services.interfaces import (
    DATE_TIME_ORIGINAL_TAG,
    GPS_DATE_STAMP_TAG,
    GPS_TIME_STAMP_TAG,
    FileMover,
    MetadataGateway,
    MetadataHandle,
)
from geostamp.types import ErrorKind, FileOutcome

LOGGER = logging.getLogger(__name__)


def build_timestamp(date: str, time: str) -> str:
    """Join a GPS date ("YYYY:MM:DD") and time ("HH:MM:SS") into an EXIF timestamp."""
    return f"{date} {time}"


class QuarantinePolicy:
    """Moves failed files into the failed-files directory."""

    def __init__(self, failed_folder: str | Path, file_mover: FileMover):
        """Initialize the quarantine policy.

        Args:
            failed_folder: Directory receiving failed files
            file_mover: Service for moving files
        """
        self.failed_folder = Path(failed_folder)
        self._file_mover = file_mover

    def ensure_folder(self) -> None:
        """Create the failed folder (and parents). Raises FailedFolderError."""
        try:
            self.failed_folder.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise FailedFolderError(f"Cannot create failed folder {self.failed_folder}: {error}") from error
        if not self.failed_folder.is_dir():
            raise FailedFolderError(f"Failed folder path is not a directory: {self.failed_folder}")

    def quarantine(self, path: Path) -> Path | None:
        """Move ``path`` into the failed folder, keeping its filename.

        Returns the new location, or None if the file could not be moved.
        """
        try:
            dest = self._file_mover.move(path, self.failed_folder)
        except (FileMoveError, OSError) as error:
            LOGGER.warning("Failed to move %s to failed folder: %s", path, error)
            return None
        LOGGER.debug("Moved failed file to: %s", dest)
        return dest


class FileProcessor:
    """Runs the per-file pipeline: timestamp correction, geofence check, persist."""

    def __init__(self, options: ProcessingOptions, metadata_gateway: MetadataGateway):
        self._options = options
        self._gateway = metadata_gateway

    def process_file(self, path: Path) -> FileOutcome:
        """Process a single image file.

        Every failure is returned as a FileOutcome, never raised. A privacy zone
        match skips the persist step so the file on disk is left untouched.
        """
        path = Path(path)
        LOGGER.debug("Processing file: %s", path)

        try:
            handle = self._gateway.open(path)
        except MetadataError as error:
            return self._failure(path, ErrorKind.METADATA_UNREADABLE, str(error))

        if self._options.correct_timestamp_from_gps:
            failure = self._correct_timestamp(path, handle)
            if failure is not None:
                return failure

        if self._options.privacy_zones:
            coordinates = handle.read_gps_coordinates()
            if coordinates is None:
                return self._failure(path, ErrorKind.MISSING_COORDINATES)
            zone_name = find_privacy_zone(coordinates, self._options.privacy_zones)
            if zone_name is not None:
                return self._failure(path, ErrorKind.INSIDE_PRIVACY_ZONE, zone_name)

        try:
            handle.persist()
        except MetadataError as error:
            return self._failure(path, ErrorKind.PERSIST_FAILED, str(error))

        LOGGER.debug("Successfully processed: %s", path)
        return FileOutcome(path=path)

    def _correct_timestamp(self, path: Path, handle: MetadataHandle) -> FileOutcome | None:
        try:
            date = handle.read_tag_literal(GPS_DATE_STAMP_TAG)
        except MetadataError as error:
            return self._failure(path, ErrorKind.MISSING_GPS_DATE, str(error))
        if not date:
            return self._failure(path, ErrorKind.MISSING_GPS_DATE)

        try:
            time = handle.read_tag_interpreted(GPS_TIME_STAMP_TAG)
        except MetadataError as error:
            return self._failure(path, ErrorKind.MISSING_GPS_TIME, str(error))
        if not time:
            return self._failure(path, ErrorKind.MISSING_GPS_TIME)

        try:
            handle.write_tag(DATE_TIME_ORIGINAL_TAG, build_timestamp(date, time))
        except MetadataError as error:
            return self._failure(path, ErrorKind.TIMESTAMP_WRITE_FAILED, str(error))
        return None

    @staticmethod
    def _failure(path: Path, kind: ErrorKind, detail: str | None = None) -> FileOutcome:
        LOGGER.debug("Failed to process %s: %s (%s)", path, kind.value, detail)
        return FileOutcome(path=path, error=kind, detail=detail)


class FolderScanner:
    """Handles discovery of candidate files in the input folder."""

    def __init__(self, input_folder: str | Path):
        self.input_folder = Path(input_folder)

    def scan_folder(self) -> list[Path]:
        """List regular files directly inside the input folder.

        No extension filter: the metadata gateway rejects non-images.
        Subdirectories are skipped. Raises InputFolderError if the folder
        cannot be listed.
        """
        try:
            entries = list(self.input_folder.iterdir())
        except OSError as error:
            raise InputFolderError(f"Cannot read input folder {self.input_folder}: {error}") from error

        files = sorted(entry for entry in entries if entry.is_file())
        LOGGER.debug("Found %d files in %s", len(files), self.input_folder)
        return files
