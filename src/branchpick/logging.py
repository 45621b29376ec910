"""Logging setup for the ``branchpick`` logger tree."""

from __future__ import annotations

import logging as py_logging
import os
import sys
from pathlib import Path
from typing import TextIO

LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
DEFAULT_LOG_PATH = Path("~/.config/branchpick/logs/branchpick.log")
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def _absolute(path: str | Path) -> Path:
    expanded = Path(os.path.expanduser(str(path)))
    return expanded if expanded.is_absolute() else expanded.resolve()


def default_log_path() -> Path:
    return _absolute(DEFAULT_LOG_PATH)


def _file_handler(log_file: str | Path) -> py_logging.Handler | None:
    log_path = _absolute(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = py_logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return None
    handler.setLevel(py_logging.DEBUG)
    return handler


def configure_logging(
    level: str = "WARN",
    stream: TextIO | None = None,
    *,
    log_file: str | Path | None = None,
) -> py_logging.Logger:
    """Route ``branchpick.*`` records to stderr and, if possible, a log file.

    Unknown level names fall back to INFO. Calling this again replaces the
    previous handlers. A log file that cannot be opened is skipped.
    """
    resolved = LOG_LEVELS.get(level.upper(), py_logging.INFO)

    stream_handler = py_logging.StreamHandler(stream or sys.stderr)
    stream_handler.setLevel(resolved)
    handlers: list[py_logging.Handler] = [stream_handler]
    if log_file:
        file_handler = _file_handler(log_file)
        if file_handler is not None:
            handlers.append(file_handler)

    formatter = py_logging.Formatter(_FORMAT)
    logger = py_logging.getLogger("branchpick")
    logger.setLevel(resolved)
    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger
