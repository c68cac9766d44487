"""Magic UI feature: animated components on top of the shadcn/ui conventions."""
from nstack.cli_support import print_info, print_success
from nstack.core.logger import get_logger
from nstack.core.template_engine import TemplateEngine
from nstack.features import FeatureContext
from nstack.features.files import append_once, write_file

logger = get_logger(__name__)

DEPENDENCIES = ["motion", "clsx", "tailwind-merge"]
CSS_MARKER = "/* nstack:magicui */"


def add_magicui(ctx: FeatureContext) -> None:
    engine = TemplateEngine()
    structure = ctx.structure
    css_path = structure.globals_css_path
    components_json = ctx.path("components.json")
    utils_path = ctx.path(f"{structure.lib_path}/utils.ts")

    ctx.console.print("[dim]Installing Magic UI dependencies...[/dim]")
    ctx.runner.run(
        ctx.package_manager.install_args(DEPENDENCIES),
        "Failed to install Magic UI dependencies",
    )

    # An existing components.json (e.g. from shadcn) already has the aliases Magic UI uses
    if components_json.exists():
        print_info(ctx.console, "components.json already exists, leaving it unchanged")
    else:
        write_file(
            components_json,
            engine.render_template("magicui/components.json.j2", {"css_path": css_path}),
        )

    if not utils_path.exists():
        write_file(utils_path, engine.read_template("shadcn/utils.ts"))

    if append_once(ctx.path(css_path), engine.read_template("magicui/globals.css"), CSS_MARKER):
        logger.info(f"Added Magic UI animations to {css_path}")

    print_success(ctx.console, "Magic UI has been set up!")
    ctx.console.print("\n[bold cyan]Next steps:[/bold cyan]")
    ctx.console.print("  npx shadcn@latest add @magicui/marquee")
