"""Project creation command - runs create-next-app and records the package manager."""
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nstack.cli_support import (
    get_runner,
    handle_cli_error,
    print_success,
    print_warning,
)
from nstack.core import prompts
from nstack.core.config import PACKAGE_MANAGER_KEY, ProjectConfig
from nstack.core.errors import NstackError
from nstack.core.logger import get_logger
from nstack.core.package_manager import PackageManager
from nstack.core.runner import CommandRunner

# Module-level console instance (will be set by register function)
console: Console = Console()
logger = get_logger(__name__)


def choose_package_manager() -> PackageManager:
    """Ask which package manager the new project should use (npm pre-selected)."""
    return prompts.select(
        "Choose your package manager",
        [(pm.value, pm) for pm in PackageManager],
        default=PackageManager.NPM,
    )


def create_project(
    project_name: str,
    package_manager: PackageManager,
    runner: CommandRunner,
    parent_dir: Optional[Path] = None,
) -> Path:
    """Scaffold a Next.js app and write its .nstack/config marker.

    The marker is written only after create-next-app succeeds.

    Returns:
        Path to the created project

    Raises:
        SubprocessFailed: If create-next-app exits non-zero
        IoError: If the marker file cannot be written
    """
    parent_dir = Path(parent_dir) if parent_dir else Path.cwd()
    project_path = parent_dir / project_name

    command, args = package_manager.create_next_app_command()
    logger.info(f"Creating Next.js project {project_name} with {package_manager.value}")
    runner.run(
        [command, *args, project_name],
        f"Failed to create Next.js project with {package_manager.value}",
    )

    marker = ProjectConfig(root=project_path, values={PACKAGE_MANAGER_KEY: package_manager.value})
    marker.save()
    return project_path


def create(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Project name (prompted if omitted)"),
    package_manager: Optional[PackageManager] = typer.Option(
        None, "--package-manager", "-p", case_sensitive=False,
        help="Package manager to use (prompted if omitted)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show tracebacks on failure"),
):
    """Create a new Next.js project.

    Runs create-next-app through the chosen package manager and remembers the
    choice in <project>/.nstack/config for later `nstack add` runs.

    Examples:
        nstack create                           # Prompt for name and package manager
        nstack create --name my-app -p pnpm     # Non-interactive
    """
    project_name = name or prompts.text("Enter project name")
    chosen_pm = package_manager or choose_package_manager()

    if (Path.cwd() / project_name).exists():
        print_warning(console, f"Directory {project_name} already exists")

    console.print(f"[cyan]Creating Next.js project with {chosen_pm.value}...[/cyan]")

    try:
        create_project(project_name, chosen_pm, get_runner())
    except NstackError as e:
        handle_cli_error(e, console, verbose=verbose)

    print_success(console, "Project created successfully!")
    console.print("\n[green]Next steps:[/green]")
    console.print(f"  cd {project_name}")
    console.print("  nstack add <feature>")


def register_project_commands(
    app: typer.Typer,
    shared_console: Console,
):
    """Register project commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(create)
