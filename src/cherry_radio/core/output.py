"""
User-facing output on top of Loguru.

Every message lands in the log file. While the blessed UI owns the terminal
nothing is printed; the UI shows the session's last error instead.
"""

import threading
from pathlib import Path

from loguru import logger

from .console import print_error, print_result

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {thread.name} | {name}:{line} | {message}"

# Set while the blessed UI owns the terminal
_blessed_mode = threading.Event()


def setup_loguru(log_file: Path, level: str = "INFO") -> None:
    """
    Send all logging to a rotating file; the terminal belongs to the UI.

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,
        level=level,
        format=LOG_FORMAT,
        enqueue=False,  # Poller threads write synchronously
    )

    logger.info(f"Logging to {log_file} (level={level})")


def set_blessed_mode() -> None:
    """Stop log() from printing while the blessed UI is on screen."""
    _blessed_mode.set()
    logger.debug("Blessed mode enabled")


def clear_blessed_mode() -> None:
    """Let log() print to the terminal again."""
    _blessed_mode.clear()
    logger.debug("Blessed mode disabled")


def is_blessed_mode() -> bool:
    return _blessed_mode.is_set()


def log(message: str, level: str = "info") -> None:
    """
    Log a user-facing message and echo it to the terminal when allowed.

    Warnings and errors are echoed to stderr, everything else to stdout.
    Threads flagged with ``silent_logging = True`` (the metadata poller)
    only ever write to the log file.

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
    """
    getattr(logger, level)(message)

    if is_blessed_mode():
        return
    if getattr(threading.current_thread(), "silent_logging", False):
        return

    if level in ("warning", "error", "critical"):
        print_error(message)
    else:
        print_result(message)
