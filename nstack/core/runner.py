"""Runs external commands (package managers, project generators)."""
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from nstack.core.errors import SubprocessFailed
from nstack.core.logger import get_logger

logger = get_logger(__name__)


class CommandRunner:
    """Blocking subprocess execution with a mock mode for dry runs and tests."""

    def __init__(self, mock: bool = False, cwd: Optional[Path] = None):
        self.mock = mock
        self.cwd = cwd
        self.history: List[List[str]] = []

    def run(self, args: Sequence[str], context: str) -> None:
        """Run a command to completion with inherited stdio.

        Args:
            args: Command and arguments
            context: Human-readable description used in the failure message

        Raises:
            SubprocessFailed: If the command exits non-zero or cannot be started
        """
        cmd = [str(a) for a in args]
        self.history.append(cmd)

        if self.mock:
            logger.info(f"MOCK: Would run {' '.join(cmd)}")
            return

        logger.debug(f"Running: {' '.join(cmd)} (cwd={self.cwd or Path.cwd()})")
        try:
            subprocess.run(cmd, cwd=self.cwd, check=True)
        except subprocess.CalledProcessError as exc:
            logger.debug(f"{context}: exit code {exc.returncode}")
            raise SubprocessFailed(cmd, context, exc.returncode) from exc
        except (FileNotFoundError, PermissionError) as exc:
            logger.debug(f"{context}: {exc}")
            raise SubprocessFailed(cmd, context) from exc

    def probe(self, binary: str, timeout: int = 5) -> bool:
        """Return True if `binary --version` can be executed.

        Only whether the binary starts matters; its exit code is ignored.
        Probes run even in mock mode since they change nothing.
        """
        try:
            subprocess.run(
                [binary, "--version"],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout,
            )
            return True
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug(f"Probe for {binary} failed: {exc}")
            return False
