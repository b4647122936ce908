"""Unified CLI entrypoint for geostamp."""

from __future__ import annotations

from typing import NoReturn

import typer

from geostamp.cli import process_commands, zone_commands

app = typer.Typer(
    name="geostamp",
    help="Fix photo capture times from GPS and keep private locations out of your library",
    add_completion=False,
)

app.command("process")(process_commands.process)
app.command("show-config")(process_commands.show_config)
app.add_typer(zone_commands.app, name="zones")


def main() -> NoReturn:
    """Main entrypoint for geostamp CLI."""
    app()
    raise SystemExit(0)


if __name__ == "__main__":
    main()
