"""File helpers shared by feature handlers.

Every helper wraps OSError (and undecodable text) in IoError naming the path and the operation.
"""
from pathlib import Path

from nstack.core.errors import IoError
from nstack.core.logger import get_logger

logger = get_logger(__name__)


def ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoError(path, "create directory") from exc
    return path


def read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IoError(path, "read") from exc


def write_file(path: Path, content: str) -> Path:
    """Write content to path, creating parent directories first."""
    ensure_dir(path.parent)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise IoError(path, "write") from exc
    logger.debug(f"Wrote {path} ({len(content)} bytes)")
    return path


def append_once(path: Path, block: str, marker: str) -> bool:
    """Append block to path unless marker already occurs in the file.

    Missing files are created with just the block.

    Returns:
        True if the file was changed
    """
    if not path.exists():
        write_file(path, block)
        return True

    existing = read_file(path)
    if marker in existing:
        logger.debug(f"{path} already contains {marker!r}, skipping append")
        return False

    separator = "" if not existing or existing.endswith("\n") else "\n"
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{separator}\n{block}")
    except OSError as exc:
        raise IoError(path, "append to") from exc
    logger.debug(f"Appended {len(block)} bytes to {path}")
    return True
