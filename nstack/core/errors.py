"""Error types raised by nstack commands and features."""
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union


class NstackError(Exception):
    """Base class for all nstack failures surfaced to the CLI."""


class NoPackageManagerFound(NstackError):
    """Raised when none of bun, pnpm, yarn or npm can be executed."""

    def __init__(self, candidates: Iterable[str] = ("bun", "pnpm", "yarn", "npm")):
        self.candidates = list(candidates)
        super().__init__(
            "No package manager found. Please install npm, yarn, pnpm, or bun."
        )


class StructureNotDetected(NstackError):
    """Raised when the project has neither an app/ nor a src/ directory."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(
            f"Could not detect project structure in {root}. "
            "Neither 'app' nor 'src' directory found."
        )


class SubprocessFailed(NstackError):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(
        self,
        command: Sequence[str],
        context: str,
        returncode: Optional[int] = None,
    ):
        self.command = list(command)
        self.context = context
        self.returncode = returncode
        detail = f"exit code {returncode}" if returncode is not None else "could not be started"
        super().__init__(f"{context} (`{' '.join(self.command)}` {detail})")


class IoError(NstackError):
    """Raised when reading or writing a project file or directory fails."""

    def __init__(self, path: Union[str, Path], operation: str):
        self.path = Path(path)
        self.operation = operation
        super().__init__(f"Failed to {operation} {self.path}")


class UnknownFeature(NstackError):
    """Raised when a feature name is not in the registry."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = list(available)
        message = f"Unknown feature: {name}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class ProviderConfigError(NstackError):
    """Raised when a database provider data file is missing or invalid."""
