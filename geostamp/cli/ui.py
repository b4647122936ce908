"""UI utilities for CLI commands using Rich."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from geostamp.geo import PrivacyZone
from geostamp.run_config import ProcessingOptions
from geostamp.types import BatchSummary, FileOutcome

console = Console()
err_console = Console(stderr=True)


def display_config_table(options: ProcessingOptions, workers: int) -> None:
    """Display processing configuration on stderr.

    Args:
        options: Options for the run
        workers: Worker pool size
    """
    config_table = Table.grid(padding=(0, 2))
    config_table.add_row("[bold]Input folder:[/bold]", str(options.input_directory))
    config_table.add_row("[bold]Failed folder:[/bold]", str(options.failed_directory))
    config_table.add_row(
        "[bold]GPS timestamps:[/bold]",
        "[green]on[/green]" if options.correct_timestamp_from_gps else "[dim]off[/dim]",
    )
    config_table.add_row("[bold]Privacy zones:[/bold]", str(len(options.privacy_zones)))
    config_table.add_row("[bold]Workers:[/bold]", str(workers))

    err_console.print("\n[bold]Processing Configuration[/bold]")
    err_console.print(Panel(config_table, border_style="blue", padding=(0, 1)))


def display_zones_table(zones: tuple[PrivacyZone, ...]) -> None:
    """Display privacy zones in configured (priority) order."""
    if not zones:
        console.print("[yellow]No privacy zones configured[/yellow]")
        return

    table = Table(title="Privacy Zones")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    table.add_column("Radius (m)", justify="right")
    for index, zone in enumerate(zones, start=1):
        table.add_row(
            str(index),
            zone.name,
            f"{zone.center.latitude:.6f}",
            f"{zone.center.longitude:.6f}",
            f"{zone.radius_meters:,.1f}",
        )
    console.print(table)


def create_progress(enabled: bool = True) -> Progress:
    """Progress bar on stderr: spinner, elapsed, bar, position and ETA."""
    return Progress(
        SpinnerColumn(style="green"),
        TimeElapsedColumn(),
        BarColumn(bar_width=40, complete_style="cyan", finished_style="blue"),
        MofNCompleteColumn(),
        TextColumn("(ETA:"),
        TimeRemainingColumn(),
        TextColumn(")"),
        console=err_console,
        transient=True,
        disable=not enabled,
    )


def display_failure(outcome: FileOutcome) -> None:
    """Print ``<path>: <reason>[ -> <new path>]`` on stderr."""
    err_console.print(outcome.describe(), markup=False, highlight=False, soft_wrap=True)


def display_processing_summary(summary: BatchSummary) -> None:
    """Print the two final count lines on stdout."""
    console.print(f"Processed {summary.succeeded} files", markup=False, highlight=False, soft_wrap=True)
    console.print(f"Failed to process {summary.failed} files", markup=False, highlight=False, soft_wrap=True)
