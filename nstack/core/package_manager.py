"""Package manager detection and command tables."""
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from nstack.core.config import ProjectConfig, get_settings
from nstack.core.errors import NoPackageManagerFound
from nstack.core.logger import get_logger
from nstack.core.runner import CommandRunner

logger = get_logger(__name__)


class PackageManager(str, Enum):
    """JavaScript package managers nstack knows how to drive."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PackageManager"]:
        """Map a name like 'pnpm' to a member; None for anything unrecognized."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @classmethod
    def detect(cls, runner: Optional[CommandRunner] = None) -> "PackageManager":
        """Probe installed binaries in preference order: bun, pnpm, yarn, npm.

        Raises:
            NoPackageManagerFound: If none of the binaries can be executed
        """
        runner = runner or CommandRunner()
        timeout = get_settings().probe_timeout
        for pm in DETECTION_ORDER:
            if runner.probe(pm.value, timeout=timeout):
                logger.debug(f"Detected package manager: {pm.value}")
                return pm
        raise NoPackageManagerFound([pm.value for pm in DETECTION_ORDER])

    @classmethod
    def from_project_config(
        cls,
        root: Path,
        runner: Optional[CommandRunner] = None,
    ) -> "PackageManager":
        """Use the package manager recorded in .nstack/config, else detect one."""
        config = ProjectConfig.load(root)
        if config is not None:
            pm = cls.parse(config.package_manager)
            if pm is not None:
                logger.debug(f"Using package manager from {config.path}: {pm.value}")
                return pm
            logger.warning(
                f"Ignoring unrecognized package_manager in {config.path}: "
                f"{config.package_manager!r}"
            )
        return cls.detect(runner)

    def install_command(self) -> Tuple[str, str]:
        return _INSTALL[self]

    def install_dev_command(self) -> Tuple[str, str]:
        return _INSTALL_DEV[self]

    def create_next_app_command(self) -> Tuple[str, List[str]]:
        command, args = _CREATE_NEXT_APP[self]
        return command, list(args)

    def install_args(self, packages: Sequence[str], dev: bool = False) -> List[str]:
        """Build the argv that installs packages, e.g. ['pnpm', 'add', '-D', 'tsx']."""
        command, subcommand = self.install_dev_command() if dev else self.install_command()
        return [command, *subcommand.split(), *packages]


DETECTION_ORDER = (
    PackageManager.BUN,
    PackageManager.PNPM,
    PackageManager.YARN,
    PackageManager.NPM,
)

_INSTALL = {
    PackageManager.NPM: ("npm", "install"),
    PackageManager.YARN: ("yarn", "add"),
    PackageManager.PNPM: ("pnpm", "add"),
    PackageManager.BUN: ("bun", "add"),
}

_INSTALL_DEV = {
    PackageManager.NPM: ("npm", "install -D"),
    PackageManager.YARN: ("yarn", "add -D"),
    PackageManager.PNPM: ("pnpm", "add -D"),
    PackageManager.BUN: ("bun", "add -D"),
}

_CREATE_NEXT_APP = {
    PackageManager.NPM: ("npx", ("create-next-app@latest",)),
    PackageManager.YARN: ("yarn", ("create", "next-app")),
    PackageManager.PNPM: ("pnpm", ("create", "next-app")),
    PackageManager.BUN: ("bunx", ("create-next-app@latest",)),
}
