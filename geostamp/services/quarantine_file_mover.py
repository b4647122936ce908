"""FileMover that never overwrites and verifies cross-volume copies."""

from __future__ import annotations

import errno
import hashlib
import logging
import os
import shutil
from pathlib import Path

from geostamp.exceptions import FileMoveError

LOGGER = logging.getLogger(__name__)


def _hash_file(path: Path, block_size: int = 65536) -> str:
    h = hashlib.md5(usedforsecurity=False)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(block_size), b""):
            h.update(chunk)
    return h.hexdigest()


def _claim_destination(source: Path, destination_dir: Path) -> Path:
    """Reserve ``destination_dir/<name>`` by creating it empty, adding ``_1``, ``_2``... if it is taken.

    The name is claimed with O_CREAT | O_EXCL, so two workers can never end up
    with the same destination.
    """
    dest = destination_dir / source.name
    i = 1
    while True:
        try:
            fd = os.open(dest, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            dest = destination_dir / f"{source.stem}_{i}{source.suffix}"
            i += 1
            continue
        except OSError as error:
            raise FileMoveError(f"Could not create {dest}: {error}") from error
        os.close(fd)
        break

    if dest.name != source.name:
        LOGGER.warning("%s already exists in %s, storing as %s", source.name, destination_dir, dest.name)
    return dest


class QuarantineFileMover:
    """Concrete implementation using os.replace with a verified copy fallback."""

    def move(self, source: Path, destination_dir: Path) -> Path:
        source = Path(source)
        destination_dir = Path(destination_dir)
        dest = _claim_destination(source, destination_dir)

        # dest is our own empty placeholder, so replacing it loses nothing
        try:
            os.replace(source, dest)
            return dest
        except OSError as error:
            if error.errno != errno.EXDEV:
                dest.unlink(missing_ok=True)
                raise FileMoveError(f"Could not move {source} to {dest}: {error}") from error

        LOGGER.debug("%s is on another volume, copying to %s", source, dest)
        return self._copy_then_delete(source, dest)

    def _copy_then_delete(self, source: Path, dest: Path) -> Path:
        try:
            shutil.copy2(source, dest)
            copied_ok = (
                dest.stat().st_size == source.stat().st_size and _hash_file(dest) == _hash_file(source)
            )
        except OSError as error:
            dest.unlink(missing_ok=True)
            raise FileMoveError(f"Could not copy {source} to {dest}: {error}") from error

        if not copied_ok:
            dest.unlink(missing_ok=True)
            raise FileMoveError(f"Copy of {source} at {dest} does not match the original")

        try:
            source.unlink()
        except OSError as error:
            raise FileMoveError(f"Copied {source} to {dest} but could not remove the original: {error}") from error
        return dest
