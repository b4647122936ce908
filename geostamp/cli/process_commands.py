"""CLI commands for batch photo processing."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from enum import IntEnum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from geostamp.cli.ui import (
    console,
    create_progress,
    display_config_table,
    display_failure,
    display_processing_summary,
    err_console,
)
from geostamp.config import setup_logging
from geostamp.exceptions import (
    ConfigurationError,
    FailedFolderError,
    InputFolderError,
    NoWorkRequestedError,
)
from geostamp.run_config import ProcessingOptions, load_processing_options, workers_from_env
from geostamp.services.factory import ServiceFactory
from geostamp.types import FileOutcome

LOGGER = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Process exit statuses. Per-file failures still exit with OK."""

    OK = 0
    INVALID_CONFIG = 2
    NO_WORK_REQUESTED = 3
    INPUT_FOLDER_UNREADABLE = 4
    FAILED_FOLDER_UNCREATABLE = 5


ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="JSON configuration file (default: $GEOSTAMP_CONFIG or geostamp.json)"),
]


_QUIET_LOGGERS = ("geostamp.components", "geostamp.run_config", "geostamp.services")


def _configure_logging(verbose: bool) -> None:
    """Configure logging levels based on verbosity.

    Args:
        verbose: If True, show DEBUG logs. Otherwise the level comes from LOG_LEVEL
            (default INFO) and internal modules stay at WARNING unless that level is DEBUG.
    """
    setup_logging(logging.DEBUG if verbose else None, force=True)

    # Per-file progress is shown by the progress bar and the failure lines
    quiet = logging.getLogger().level > logging.DEBUG
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING if quiet else logging.NOTSET)


def _fail(code: ExitCode, message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code=int(code))


def load_options_or_exit(
    config: Path | None,
    input_dir: Path | None = None,
    failed_dir: Path | None = None,
    gps_timestamps: bool | None = None,
) -> ProcessingOptions:
    """Load options, apply CLI overrides, and map configuration errors to exit codes."""
    try:
        options = load_processing_options(config)
    except ConfigurationError as error:
        raise _fail(ExitCode.INVALID_CONFIG, str(error)) from error

    if input_dir is not None:
        options = replace(options, input_directory=input_dir)
    if failed_dir is not None:
        options = replace(options, failed_directory=failed_dir)
    if gps_timestamps is not None:
        options = replace(options, correct_timestamp_from_gps=gps_timestamps)
    return options


def process(
    config: ConfigOption = None,
    input_dir: Annotated[
        Path | None, typer.Option("--input-dir", "-i", help="Folder with images to process")
    ] = None,
    failed_dir: Annotated[
        Path | None, typer.Option("--failed-dir", "-f", help="Folder receiving files that fail processing")
    ] = None,
    gps_timestamps: Annotated[
        bool | None,
        typer.Option("--gps-timestamps/--no-gps-timestamps", help="Rewrite DateTimeOriginal from GPS date/time"),
    ] = None,
    workers: Annotated[
        int | None, typer.Option("--workers", "-w", min=1, help="Worker threads (default: CPU count)")
    ] = None,
    no_progress: Annotated[bool, typer.Option("--no-progress", help="Hide the progress bar")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    """Correct capture timestamps from GPS and quarantine images inside privacy zones."""
    _configure_logging(verbose)

    options = load_options_or_exit(config, input_dir, failed_dir, gps_timestamps)
    try:
        options.validate()
    except NoWorkRequestedError as error:
        raise _fail(ExitCode.NO_WORK_REQUESTED, str(error)) from error

    processor = ServiceFactory.create_processor(options, max_workers=workers or workers_from_env())

    try:
        files = processor.prepare()
    except InputFolderError as error:
        raise _fail(ExitCode.INPUT_FOLDER_UNREADABLE, str(error)) from error
    except FailedFolderError as error:
        raise _fail(ExitCode.FAILED_FOLDER_UNCREATABLE, str(error)) from error

    if verbose:
        display_config_table(options, processor.max_workers)

    with create_progress(enabled=not no_progress and err_console.is_terminal) as progress:
        task = progress.add_task("Processing", total=len(files))

        def _on_outcome(outcome: FileOutcome) -> None:
            if not outcome.succeeded:
                display_failure(outcome)
            progress.advance(task)

        summary = processor.process_all_files(files, on_outcome=_on_outcome)

    display_processing_summary(summary)
    raise typer.Exit(code=int(ExitCode.OK))


def show_config(config: ConfigOption = None) -> None:
    """Show the effective configuration after environment overrides."""
    options = load_options_or_exit(config)
    display_config_table(options, workers_from_env() or os.cpu_count() or 1)
    console.print_json(data=options.to_dict())
    raise typer.Exit(code=int(ExitCode.OK))
