"""Batch processing logic: fan out over the input folder and aggregate outcomes."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from pathlib import Path
from typing import Callable

from geostamp.components import FileProcessor, FolderScanner, QuarantinePolicy
from geostamp.run_config import ProcessingOptions
from geostamp.services.interfaces import FileMover, MetadataGateway
from geostamp.types import BatchSummary, ErrorKind, FileOutcome

LOGGER = logging.getLogger(__name__)

OutcomeCallback = Callable[[FileOutcome], None]


class PhotoBatchProcessor:
    """Orchestrates per-file processing over an input folder using separate components."""

    def __init__(
        self,
        options: ProcessingOptions,
        metadata_gateway: MetadataGateway,
        file_mover: FileMover,
        max_workers: int | None = None,
    ) -> None:
        """Initialize the processor with its component dependencies.

        Args:
            options: Processing options shared by all workers
            metadata_gateway: Service for reading and writing image metadata
            file_mover: Service for moving failed files
            max_workers: Worker pool size, defaults to the CPU count
        """
        self.options = options
        self.max_workers = max_workers or os.cpu_count() or 1

        self._folder_scanner = FolderScanner(options.input_directory)
        self._quarantine_policy = QuarantinePolicy(options.failed_directory, file_mover)
        self._file_processor = FileProcessor(options, metadata_gateway)

        LOGGER.debug("Processor initialized for folder: %s", options.input_directory)
        LOGGER.debug("Run configuration: %s", options.to_dict())

    @property
    def input_folder(self) -> Path:
        return self._folder_scanner.input_folder

    @property
    def failed_folder(self) -> Path:
        return self._quarantine_policy.failed_folder

    def prepare(self) -> list[Path]:
        """Validate options and set up folders. Returns the files to process.

        Raises NoWorkRequestedError, InputFolderError or FailedFolderError; all
        of them are fatal and happen before any file is touched.
        """
        self.options.validate()
        files = self._folder_scanner.scan_folder()
        self._quarantine_policy.ensure_folder()
        return files

    def process_file(self, path: Path) -> FileOutcome:
        """Process one file and quarantine it on failure.

        Runs entirely on one worker, so the file and its metadata handle are
        never shared.
        """
        try:
            outcome = self._file_processor.process_file(path)
        except Exception as error:
            LOGGER.error("Unexpected error while processing %s", path, exc_info=True)
            outcome = FileOutcome(
                path=path,
                error=ErrorKind.UNEXPECTED_ERROR,
                detail=f"{type(error).__name__}: {error}",
            )

        if outcome.succeeded:
            return outcome
        return replace(outcome, quarantined_to=self._quarantine_policy.quarantine(path))

    def process_all_files(
        self,
        file_paths: list[Path],
        on_outcome: OutcomeCallback | None = None,
    ) -> BatchSummary:
        """Process all files concurrently.

        ``on_outcome`` is called once per file, in completion order, from the
        calling thread.
        """
        summary = BatchSummary(files_found=len(file_paths))
        if not file_paths:
            LOGGER.debug("No files to process")
            return summary

        LOGGER.debug("Processing %d files with %d workers", len(file_paths), self.max_workers)

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="geostamp") as executor:
            futures = [executor.submit(self.process_file, path) for path in file_paths]
            for future in as_completed(futures):
                outcome = future.result()
                summary.add(outcome)
                if on_outcome is not None:
                    on_outcome(outcome)

        LOGGER.info("Processing complete: %d succeeded, %d failed", summary.succeeded, summary.failed)
        return summary

    def process_folder(self, on_outcome: OutcomeCallback | None = None) -> BatchSummary:
        """Main entry point: set up folders, then process every file found."""
        LOGGER.debug("Starting folder processing")
        files = self.prepare()
        return self.process_all_files(files, on_outcome=on_outcome)
