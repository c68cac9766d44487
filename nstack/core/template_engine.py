"""Template rendering for generated project files."""
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from nstack.core.errors import IoError
from nstack.core.logger import get_logger

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class TemplateEngine:
    """Renders Jinja2 templates stored under nstack/templates/."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir or TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render_template(self, template_name: str, context: Optional[Dict[str, Any]] = None) -> str:
        """Render a template (path relative to the template dir) with context.

        Raises:
            TemplateError: If the template is missing or references an undefined value
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(**(context or {}))
        except TemplateError as e:
            logger.error(f"Failed to render template {template_name}: {e}")
            raise

    def read_template(self, template_name: str) -> str:
        """Return a template file verbatim, without rendering.

        Raises:
            IoError: If the file cannot be read
        """
        path = self.template_dir / template_name
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IoError(path, "read") from exc
