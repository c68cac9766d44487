"""shadcn/ui feature: component config, cn() helper and theme variables."""
from nstack.cli_support import print_success
from nstack.core.logger import get_logger
from nstack.core.template_engine import TemplateEngine
from nstack.features import FeatureContext
from nstack.features.files import append_once, write_file

logger = get_logger(__name__)

DEPENDENCIES = [
    "class-variance-authority",
    "clsx",
    "tailwind-merge",
    "lucide-react",
    "tw-animate-css",
]
CSS_MARKER = "/* nstack:shadcn */"


def add_shadcn(ctx: FeatureContext) -> None:
    engine = TemplateEngine()
    structure = ctx.structure
    css_path = structure.globals_css_path
    utils_path = f"{structure.lib_path}/utils.ts"

    ctx.console.print("[dim]Installing shadcn/ui dependencies...[/dim]")
    ctx.runner.run(
        ctx.package_manager.install_args(DEPENDENCIES),
        "Failed to install shadcn/ui dependencies",
    )

    ctx.console.print("[dim]Writing shadcn/ui configuration...[/dim]")
    write_file(
        ctx.path("components.json"),
        engine.render_template("shadcn/components.json.j2", {"css_path": css_path}),
    )
    write_file(ctx.path(utils_path), engine.read_template("shadcn/utils.ts"))

    if append_once(ctx.path(css_path), engine.read_template("shadcn/globals.css"), CSS_MARKER):
        logger.info(f"Added shadcn/ui theme variables to {css_path}")

    print_success(ctx.console, "shadcn/ui has been set up!")
    ctx.console.print("\n[bold cyan]Files created:[/bold cyan]")
    ctx.console.print("• components.json - shadcn/ui configuration")
    ctx.console.print(f"• {utils_path} - cn() class name helper")
    ctx.console.print(f"• {css_path} - theme variables (appended)")
    ctx.console.print("\n[bold cyan]Next steps:[/bold cyan]")
    ctx.console.print("  npx shadcn@latest add button")
