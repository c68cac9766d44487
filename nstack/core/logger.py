"""Logging for nstack: Rich on the terminal, optional detailed log file."""
import logging
import tempfile
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Log records go to stderr so command output on stdout stays clean
console = Console(stderr=True)

LOG_FILE = Path.home() / ".nstack" / "logs" / "nstack.log"

_file_logging_configured = False


def setup_file_logging(log_file: str = None, verbose: bool = False):
    """Attach a file handler to the `nstack` logger (once per process).

    Args:
        log_file: Path to log file (defaults to ~/.nstack/logs/nstack.log)
        verbose: Record DEBUG entries (every subprocess and file write)

    Note:
        Falls back to <tempdir>/nstack.log if the log directory cannot be created.
    """
    global _file_logging_configured

    if _file_logging_configured:
        return

    target_log_file = Path(log_file) if log_file else LOG_FILE
    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = Path(tempfile.gettempdir()) / "nstack.log"

    file_handler = logging.FileHandler(target_log_file)
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    package_logger = logging.getLogger("nstack")
    package_logger.addHandler(file_handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    _file_logging_configured = True
    package_logger.info(f"nstack logging initialized: {target_log_file}")


def get_logger(name: str) -> logging.Logger:
    """Return a module logger that prints warnings and errors through Rich.

    INFO and DEBUG records only reach the log file, once setup_file_logging()
    has been called.
    """
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler.setLevel(logging.WARNING)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)

    return logger
