"""nstack runtime settings and the per-project marker file."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from nstack.core.errors import IoError
from nstack.core.logger import get_logger

logger = get_logger(__name__)

# Marker folder and file written into every project created by nstack
MARKER_DIR = ".nstack"
MARKER_FILE = "config"
PACKAGE_MANAGER_KEY = "package_manager"


@dataclass
class NstackSettings:
    """Runtime configuration for nstack operations.

    Attributes:
        mock: Log external commands instead of running them (default: False)
        log_file: Log file path used when file logging is enabled
        probe_timeout: Timeout in seconds for package manager version probes (default: 5)
    """

    mock: bool = False
    log_file: Optional[str] = None
    probe_timeout: int = 5

    @classmethod
    def from_env(cls) -> "NstackSettings":
        """Create settings from environment variables.

        Environment variables:
            NSTACK_MOCK: Set to 1 to run in mock mode
            NSTACK_LOG_FILE: Log file path
            NSTACK_PROBE_TIMEOUT: Version probe timeout in seconds

        Returns:
            NstackSettings instance with values from environment or defaults
        """
        return cls(
            mock=os.getenv("NSTACK_MOCK") == "1",
            log_file=os.getenv("NSTACK_LOG_FILE") or None,
            probe_timeout=_int_env("NSTACK_PROBE_TIMEOUT", cls.probe_timeout),
        )


def _int_env(name: str, default: int) -> int:
    """Read a positive integer env var, falling back to default on bad input."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        logger.warning(f"Ignoring {name}={raw!r}: expected a positive integer, using {default}")
        return default
    return value


# Global settings instance (can be overridden)
_settings: Optional[NstackSettings] = None


def get_settings() -> NstackSettings:
    """Get the global nstack settings, creating them from the environment once."""
    global _settings
    if _settings is None:
        _settings = NstackSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None


@dataclass
class ProjectConfig:
    """Key/value settings persisted in <project>/.nstack/config."""

    root: Path
    values: Dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> Path:
        return marker_path(self.root)

    @property
    def package_manager(self) -> Optional[str]:
        return self.values.get(PACKAGE_MANAGER_KEY)

    @classmethod
    def load(cls, root: Path) -> Optional["ProjectConfig"]:
        """Read the marker file under root, or return None if there is none."""
        path = marker_path(root)
        if not path.is_file():
            return None

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IoError(path, "read") from exc

        values = {}
        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip()

        logger.debug(f"Loaded project config from {path}: {values}")
        return cls(root=Path(root), values=values)

    def save(self) -> Path:
        """Write all values to the marker file, creating .nstack/ as needed."""
        path = self.path
        content = "".join(f"{key}={value}\n" for key, value in self.values.items())
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise IoError(path, "write") from exc

        logger.debug(f"Saved project config to {path}")
        return path


def marker_path(root: Path) -> Path:
    """Return the marker file location for a project root."""
    return Path(root) / MARKER_DIR / MARKER_FILE
