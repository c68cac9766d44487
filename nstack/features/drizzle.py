"""Drizzle ORM feature: installs a database provider and writes starter files."""
from pathlib import Path
from typing import List, Optional

from nstack.cli_support import print_info, print_success
from nstack.core import prompts
from nstack.core.logger import get_logger
from nstack.features import FeatureContext
from nstack.features.files import ensure_dir, read_file, write_file
from nstack.features.providers import DatabaseProvider, ProviderRegistry

logger = get_logger(__name__)

CONFIG_FILE = "drizzle.config.ts"
MIGRATIONS_DIR = "drizzle"
PACKAGE_JSON = "package.json"
ENV_FILE = ".env"
EXAMPLE_USAGE_FILE = "src/example-usage.ts"

# package.json patch: presence of the marker means the scripts are already there
SCRIPTS_MARKER = '"db:generate"'
SCRIPTS_OPENING = '"scripts": {'
DRIZZLE_SCRIPTS = '''"scripts": {
    "db:generate": "drizzle-kit generate",
    "db:migrate": "drizzle-kit migrate",
    "db:studio": "drizzle-kit studio",
    "db:push": "drizzle-kit push",'''


def select_provider(registry: ProviderRegistry) -> DatabaseProvider:
    providers = registry.list_providers()
    key = prompts.select(
        "Select your database provider",
        [(p.title, p.key) for p in providers],
        default=providers[0].key,
    )
    return registry.get(key)


def patch_package_json(path: Path) -> bool:
    """Insert the db:* scripts right after the scripts opening, once.

    This is a plain text substitution so the user's formatting is untouched.
    Nothing is inserted when the marker is present, when the file is missing,
    or when the opening text is not found verbatim.

    Returns:
        True if the file was rewritten
    """
    if not path.exists():
        logger.info(f"No {path.name} found, skipping script setup")
        return False

    content = read_file(path)
    if SCRIPTS_MARKER in content:
        logger.debug(f"{path} already has Drizzle scripts")
        return False

    if SCRIPTS_OPENING not in content:
        logger.warning(f"Could not find {SCRIPTS_OPENING!r} in {path}; scripts not added")
        return False

    write_file(path, content.replace(SCRIPTS_OPENING, DRIZZLE_SCRIPTS, 1))
    return True


def update_env_file(path: Path, provider: DatabaseProvider) -> bool:
    """Create .env from the provider template, or append the template to it.

    The append is skipped if the provider's variable name appears anywhere in
    the file, even inside a comment or another variable's name.

    Returns:
        True if the file was created or changed
    """
    if not path.exists():
        write_file(path, provider.env_template)
        return True

    existing = read_file(path)
    if provider.env_var in existing:
        logger.debug(f"{path} already mentions {provider.env_var}")
        return False

    write_file(path, f"{existing}\n\n{provider.env_template}")
    return True


def add_drizzle(ctx: FeatureContext, registry: Optional[ProviderRegistry] = None) -> None:
    """Install Drizzle ORM for an interactively chosen database provider."""
    registry = registry or ProviderRegistry()
    console = ctx.console
    pm = ctx.package_manager

    provider = select_provider(registry)
    console.print(f"[bold green]Selected: {provider.name}[/bold green]")
    logger.info(f"Adding Drizzle ORM with provider {provider.key} using {pm.value}")

    console.print(f"[dim]Installing Drizzle ORM dependencies for {provider.name}...[/dim]")
    ctx.runner.run(
        pm.install_args(provider.dependencies),
        f"Failed to install Drizzle ORM dependencies for {provider.name}",
    )
    ctx.runner.run(
        pm.install_args(provider.dev_dependencies, dev=True),
        f"Failed to install Drizzle dev dependencies for {provider.name}",
    )

    console.print("[dim]Setting up Drizzle configuration...[/dim]")
    write_file(ctx.path(CONFIG_FILE), registry.render_config(provider))

    db_dir = ensure_dir(ctx.path(ctx.structure.db_path))
    write_file(db_dir / "schema.ts", registry.render_schema(provider))
    write_file(db_dir / "index.ts", provider.connection)

    ensure_dir(ctx.path(MIGRATIONS_DIR))

    console.print("[dim]Updating package.json scripts...[/dim]")
    patch_package_json(ctx.path(PACKAGE_JSON))

    console.print("[dim]Creating environment variables template...[/dim]")
    update_env_file(ctx.path(ENV_FILE), provider)

    api_route = ctx.structure.api_route_path
    write_file(ctx.path(api_route), registry.render_api_route(provider, ctx.structure))
    write_file(ctx.path(EXAMPLE_USAGE_FILE), provider.example_usage)

    if provider.client_placeholder:
        write_file(ctx.path(provider.client_placeholder.path), provider.client_placeholder.content)

    _print_summary(ctx, provider, api_route)


def _print_summary(ctx: FeatureContext, provider: DatabaseProvider, api_route: str) -> None:
    console = ctx.console
    db_path = ctx.structure.db_path

    print_success(console, f"Drizzle ORM has been successfully set up for {provider.name}!")

    steps: List[str] = [
        f"Update your {provider.env_var} in {ENV_FILE}",
        "Run 'npm run db:push' to push the schema to your database",
        "Run 'npm run db:generate' to generate migrations",
        "Run 'npm run db:studio' to open Drizzle Studio",
        f"Test with: npx tsx {EXAMPLE_USAGE_FILE}",
    ]
    if provider.client_placeholder:
        steps.extend(provider.client_placeholder.hints)

    console.print("\n[bold cyan]Next steps:[/bold cyan]")
    for number, step in enumerate(steps, start=1):
        console.print(f"{number}. {step}")

    console.print("\n[bold cyan]Files created:[/bold cyan]")
    console.print(f"• {CONFIG_FILE} - Drizzle configuration")
    console.print(f"• {db_path}/schema.ts - Database schema")
    console.print(f"• {db_path}/index.ts - Database connection")
    console.print(f"• {api_route} - Example API route")
    console.print(f"• {EXAMPLE_USAGE_FILE} - Example usage file")
    console.print(f"• {ENV_FILE} - Environment variables template")
    if provider.client_placeholder:
        console.print(
            f"• {provider.client_placeholder.path} - client placeholder (needs configuration)"
        )

    console.print("\n[bold cyan]Provider-specific details:[/bold cyan]")
    print_info(console, f"Database: {provider.name}", prefix="•")
    print_info(console, f"Connection: {provider.connection_label}", prefix="•")
