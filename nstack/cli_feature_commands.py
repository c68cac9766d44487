"""Feature commands - add features to a project and list what is available."""
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nstack.cli_support import get_runner, handle_cli_error, print_error
from nstack.core import prompts
from nstack.core.errors import NstackError, UnknownFeature
from nstack.core.logger import get_logger
from nstack.features import Feature, FeatureContext, get_feature, list_features

# Module-level console instance (will be set by register function)
console: Console = Console()
logger = get_logger(__name__)


def choose_feature() -> Feature:
    features = list_features()
    name = prompts.select(
        "Select a feature to add",
        [(f.name, f.name) for f in features],
        default=features[0].name,
    )
    return get_feature(name)


def add(
    feature: Optional[str] = typer.Option(None, "--feature", "-f", help="Feature name (prompted if omitted)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show tracebacks on failure"),
):
    """Add a feature to the current project.

    Run inside a project created with `nstack create` (or any Next.js
    project with an app/ or src/ directory).

    Examples:
        nstack add                        # Pick a feature interactively
        nstack add --feature drizzle      # Drizzle ORM + database provider
    """
    if feature is not None:
        try:
            selected = get_feature(feature)
        except UnknownFeature as e:
            print_error(console, str(e))
            console.print("[dim]Run 'nstack list' to see available features[/dim]")
            raise typer.Exit(2)
    else:
        selected = choose_feature()

    root = Path.cwd()
    try:
        ctx = FeatureContext.resolve(root, console, get_runner(cwd=root))
        console.print(f"[yellow]Using package manager: {ctx.package_manager.value}[/yellow]")
        console.print(f"[yellow]Project structure: {ctx.structure.value}[/yellow]")
        logger.info(f"Adding feature {selected.name} to {root}")
        selected.handler(ctx)
    except NstackError as e:
        handle_cli_error(e, console, verbose=verbose)


def list_command():
    """List the features that `nstack add` can install."""
    console.print("\n[bold cyan]Available Features:[/bold cyan]")
    console.print("[cyan]----------------[/cyan]")

    for feature in list_features():
        console.print(f"[bold green]{feature.name}[/bold green] - {feature.description}")

    console.print("\n[bold cyan]Usage:[/bold cyan]")
    console.print("  nstack add --feature <feature-name>")
    console.print("  nstack add (for interactive selection)")


def register_feature_commands(
    app: typer.Typer,
    shared_console: Console,
):
    """Register feature commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(add)
    app.command("list")(list_command)
