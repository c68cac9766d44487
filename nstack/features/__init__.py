"""Installable features and the registry the `add` and `list` commands use."""
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List

from rich.console import Console

from nstack.core.errors import UnknownFeature
from nstack.core.package_manager import PackageManager
from nstack.core.project_structure import ProjectStructure
from nstack.core.runner import CommandRunner


@dataclass
class FeatureContext:
    """Everything a feature handler needs, resolved once per command."""

    root: Path
    console: Console
    runner: CommandRunner
    package_manager: PackageManager
    structure: ProjectStructure

    @classmethod
    def resolve(cls, root: Path, console: Console, runner: CommandRunner) -> "FeatureContext":
        """Load/detect the package manager and detect the project structure.

        Raises:
            NoPackageManagerFound: If no package manager is recorded or installed
            StructureNotDetected: If root has neither app/ nor src/
        """
        package_manager = PackageManager.from_project_config(root, runner)
        structure = ProjectStructure.detect(root)
        return cls(
            root=Path(root),
            console=console,
            runner=runner,
            package_manager=package_manager,
            structure=structure,
        )

    def path(self, relative: str) -> Path:
        return self.root / relative


@dataclass(frozen=True)
class Feature:
    """A named, self-contained addition to a generated project."""

    name: str
    description: str
    handler: Callable[[FeatureContext], None]


def _registry() -> Dict[str, Feature]:
    # Imported here so feature modules can import FeatureContext from this package
    from nstack.features.drizzle import add_drizzle
    from nstack.features.magicui import add_magicui
    from nstack.features.shadcn import add_shadcn

    features = [
        Feature("shadcn", "Add shadcn/ui components and configuration", add_shadcn),
        Feature("magicui", "Add magicui components and configuration", add_magicui),
        Feature("drizzle", "Add Drizzle ORM with a choice of database provider", add_drizzle),
    ]
    return {f.name: f for f in features}


def list_features() -> List[Feature]:
    """Return the registry in its fixed display order."""
    return list(_registry().values())


def get_feature(name: str) -> Feature:
    """Look up a feature by exact (case-sensitive) name.

    Raises:
        UnknownFeature: If the name is not registered
    """
    registry = _registry()
    if name not in registry:
        raise UnknownFeature(name, registry.keys())
    return registry[name]
