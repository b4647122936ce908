"""Privacy zone inspection commands for geostamp CLI."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape

from geostamp.cli.process_commands import ConfigOption, load_options_or_exit
from geostamp.cli.ui import console, display_zones_table
from geostamp.geo import distance_meters, find_privacy_zone
from geostamp.types import Coordinate

app = typer.Typer(name="zones", help="Privacy zone inspection commands")


@app.command("list")
def list_zones(config: ConfigOption = None) -> None:
    """List configured privacy zones in priority order."""
    options = load_options_or_exit(config)
    display_zones_table(options.privacy_zones)
    raise typer.Exit(0)


@app.command()
def locate(
    latitude: Annotated[float, typer.Argument(min=-90.0, max=90.0, help="Latitude in decimal degrees")],
    longitude: Annotated[float, typer.Argument(min=-180.0, max=180.0, help="Longitude in decimal degrees")],
    config: ConfigOption = None,
) -> None:
    """Report which privacy zone (if any) would reject a photo taken at a position.

    Exits with 1 when the position is inside a zone.
    """
    options = load_options_or_exit(config)
    point = Coordinate(latitude=latitude, longitude=longitude)

    for zone in options.privacy_zones:
        distance = distance_meters(point, zone.center)
        marker = "[red]inside[/red]" if distance <= zone.radius_meters else "[green]outside[/green]"
        console.print(
            f"{escape(zone.name)}: {distance:,.3f} m from centre (radius {zone.radius_meters:,.1f} m) {marker}"
        )

    zone_name = find_privacy_zone(point, options.privacy_zones)
    if zone_name is None:
        console.print("[green]Not inside any privacy zone[/green]")
        raise typer.Exit(0)

    console.print(f"[red]Inside privacy zone '{escape(zone_name)}'[/red]")
    raise typer.Exit(1)
