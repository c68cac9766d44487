#!/usr/bin/env python3
"""nstack CLI - Next.js project scaffolding."""
from typing import Optional

import typer
from rich.console import Console

from nstack import __version__
from nstack.cli_feature_commands import register_feature_commands
from nstack.cli_project_commands import register_project_commands
from nstack.cli_support import setup_file_logging
from nstack.core.config import get_settings

app = typer.Typer(
    name="nstack",
    help="""nstack - Next.js projects with batteries

Create a project, then add features to it.

Quick start:
  nstack create --name my-app       # Scaffold with create-next-app
  nstack list                       # Browse features
  nstack add --feature drizzle      # Add Drizzle ORM

More commands: nstack --help
""",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"nstack {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_file: Optional[str] = typer.Option(
        None, "--log-file", help="Write a detailed log to this file (or set NSTACK_LOG_FILE)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Log debug details to the log file"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Global options applied before any command runs."""
    target = log_file or get_settings().log_file
    if target or debug:
        setup_file_logging(log_file=target, verbose=debug)


# Attach modular subcommands
register_project_commands(app, console)
register_feature_commands(app, console)

if __name__ == "__main__":
    app()
