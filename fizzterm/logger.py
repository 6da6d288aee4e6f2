"""Logging configuration using loguru.

Logs are stored in the logs/ folder and kept for 1 week.
Output goes to file only, since stdout belongs to the TUI and to palette
detection replies.
"""

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    import loguru

# Remove default handler
logger.remove()

# Define log directory (default ~/.local/share/fizzterm/logs, overridable via FIZZTERM_LOG_DIR)
_default_log_dir = Path.home() / ".local" / "share" / "fizzterm" / "logs"
LOG_DIR = Path(os.environ.get("FIZZTERM_LOG_DIR", str(_default_log_dir))).expanduser().resolve()
LOG_DIR.mkdir(parents=True, exist_ok=True)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
STDERR_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"


class _LoggingState:
    """Internal state tracker for logging configuration."""

    def __init__(self) -> None:
        self.file_handler_id: int | None = None
        self.stderr_handler_id: int | None = None


_state = _LoggingState()


def configure_file_sink(level: str = "DEBUG") -> int:
    """(Re)install the rotating file sink at the given level.

    Args:
        level: Minimum level written to the log file.

    Returns:
        The loguru handler ID.
    """
    if _state.file_handler_id is not None:
        logger.remove(_state.file_handler_id)

    _state.file_handler_id = logger.add(
        LOG_DIR / "fizzterm_{time:YYYY-MM-DD}.log",
        level=level,
        format=FILE_FORMAT,
        rotation="00:00",  # New file at midnight
        retention="1 week",  # Keep logs for 1 week
        compression="gz",  # Compress old logs
        backtrace=True,
        diagnose=False,
    )
    return _state.file_handler_id


configure_file_sink()


def get_logger(name: str) -> "loguru.Logger":
    """Get a logger instance with the given name.

    Args:
        name: The name for the logger (typically __name__).

    Returns:
        A configured logger instance.
    """
    return logger.bind(name=name)


def enable_stderr(level: str = "WARNING") -> int:
    """Mirror logs to stderr, for non-interactive runs such as ``--dump``.

    Args:
        level: Minimum level printed to stderr.

    Returns:
        The loguru handler ID.
    """
    if _state.stderr_handler_id is not None:
        logger.remove(_state.stderr_handler_id)
    _state.stderr_handler_id = logger.add(sys.stderr, level=level, format=STDERR_FORMAT, colorize=True)
    return _state.stderr_handler_id


def disable_stderr() -> None:
    """Stop mirroring logs to stderr."""
    if _state.stderr_handler_id is not None:
        logger.remove(_state.stderr_handler_id)
        _state.stderr_handler_id = None
