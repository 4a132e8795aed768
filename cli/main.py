#!/usr/bin/env python3
"""
Diagram Replay CLI - record and replay diagram editing sessions

Main entrypoint for the diagram-replay command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import log, replay
from diagram_replay.logging_config import setup_logging

# Initialize Typer app
app = typer.Typer(
    name="diagram-replay",
    help="Record and replay diagram editing sessions",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add command groups
app.add_typer(log.app, name="log", help="Event log operations")

# Add standalone commands
app.command(name="demo")(replay.demo_command)


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity to stderr"),
):
    """Record and replay diagram editing sessions."""
    setup_logging(default_level="INFO" if verbose else "WARNING")


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from diagram_replay import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Diagram Replay CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
