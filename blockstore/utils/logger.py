"""
Logging for the block store.

The package is a library: importing it never installs output handlers, it
only hangs a NullHandler on the "blockstore" logger so records are dropped
unless the embedding node configures logging. The node opts in with
setup_logging(), which may be called again to change the level or add a log
file; each call replaces the handlers installed by the previous one.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

import colorlog

ROOT_LOGGER_NAME = "blockstore"
LOG_FILE_NAME = "blockstore.log"

_CONSOLE_FORMAT = "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s"
_FILE_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

_root = logging.getLogger(ROOT_LOGGER_NAME)
_root.addHandler(logging.NullHandler())

# Handlers owned by setup_logging(); foreign handlers on the logger are left alone
_installed: List[logging.Handler] = []
_setup_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Child logger for a subsystem, e.g. get_logger("storage.sqlite")."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
) -> logging.Logger:
    """
    Configure block store output.

    Args:
        level: Level applied to the "blockstore" logger and its handlers
        log_dir: Directory for blockstore.log. Defaults to ./logs
        log_to_file: Also write plain-text records to a log file

    Returns:
        The configured "blockstore" logger
    """
    with _setup_lock:
        _remove_installed()
        _root.setLevel(level)

        console = colorlog.StreamHandler(sys.stdout)
        console.setFormatter(
            colorlog.ColoredFormatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT, log_colors=_LOG_COLORS)
        )
        handlers: List[logging.Handler] = [console]

        if log_to_file:
            directory = Path(log_dir) if log_dir else Path("logs")
            directory.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(directory / LOG_FILE_NAME)
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
            handlers.append(file_handler)

        for handler in handlers:
            handler.setLevel(level)
            _root.addHandler(handler)
            _installed.append(handler)

    return _root


def reset_logging() -> None:
    """Close and detach the handlers installed by setup_logging()."""
    with _setup_lock:
        _remove_installed()
        _root.setLevel(logging.NOTSET)


def _remove_installed() -> None:
    while _installed:
        handler = _installed.pop()
        _root.removeHandler(handler)
        handler.close()
