"""Detects whether a Next.js project is app/-rooted or src/-rooted."""
from enum import Enum
from pathlib import Path
from typing import Optional

from nstack.core.errors import StructureNotDetected


class ProjectStructure(Enum):
    """Root layout of a Next.js project; determines where generated files go."""

    APP_DIR = "appdir"
    SRC_DIR = "srcdir"

    @classmethod
    def detect(cls, root: Optional[Path] = None) -> "ProjectStructure":
        """Inspect root (default: cwd). app/ is checked first and wins a tie.

        Raises:
            StructureNotDetected: If neither app/ nor src/ exists
        """
        root = Path(root) if root is not None else Path.cwd()
        if (root / "app").exists():
            return cls.APP_DIR
        if (root / "src").exists():
            return cls.SRC_DIR
        raise StructureNotDetected(root)

    @property
    def globals_css_path(self) -> str:
        return "app/globals.css" if self is ProjectStructure.APP_DIR else "src/app/globals.css"

    @property
    def lib_path(self) -> str:
        return "lib" if self is ProjectStructure.APP_DIR else "src/lib"

    @property
    def db_path(self) -> str:
        return "db" if self is ProjectStructure.APP_DIR else "src/db"

    @property
    def is_app_router(self) -> bool:
        return self is ProjectStructure.APP_DIR

    @property
    def api_route_path(self) -> str:
        # Example route location for the Drizzle feature
        if self.is_app_router:
            return "src/app/api/users/route.ts"
        return "src/pages/api/users.ts"
