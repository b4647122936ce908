"""Custom exceptions for geostamp.

This module defines the exception hierarchy used across the batch processor:
configuration loading, metadata access, folder setup and file moves.

All exceptions inherit from GeostampError for consistent error handling.
Per-file failures are never raised past the file processor; they are turned
into FileOutcome values (see geostamp.types.ErrorKind).
"""

from __future__ import annotations


class GeostampError(Exception):
    """Base exception for all geostamp errors."""


# Configuration exceptions


class ConfigurationError(GeostampError, ValueError):
    """Raised when the configuration file or environment overrides are invalid.

    This can occur due to:
    - Malformed JSON
    - Privacy zones with an empty name, negative radius or out-of-range centre
    - Values of the wrong type
    """


class NoWorkRequestedError(ConfigurationError):
    """Raised when both timestamp correction and geofencing are disabled."""


# Metadata exceptions


class MetadataError(GeostampError):
    """Base class for failures reported by a metadata gateway."""


class MetadataReadError(MetadataError):
    """Raised when a file is not a readable/recognized image container."""


class MetadataWriteError(MetadataError):
    """Raised when the gateway rejects an in-memory tag write."""


class MetadataPersistError(MetadataError):
    """Raised when saving metadata back to the file fails."""


# Folder setup exceptions (fatal, raised before any file is processed)


class FolderSetupError(GeostampError, OSError):
    """Raised when a directory required by the run cannot be used."""


class InputFolderError(FolderSetupError):
    """Raised when the input directory cannot be listed."""


class FailedFolderError(FolderSetupError):
    """Raised when the failed-files directory cannot be created."""


# File operations exceptions


class FileMoveError(GeostampError, OSError):
    """Raised when moving a file into quarantine fails.

    This can occur due to:
    - Permission issues
    - Disk space problems
    - A cross-volume copy that does not match its source
    """
