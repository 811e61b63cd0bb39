"""One-time logging setup for the bridge."""

from __future__ import annotations

import logging
import sys
import threading

from .config import DEFAULT_LOG_LEVEL

LOGGER_NAME = "mcpbridge"
TRACE = 5
_OFF = logging.CRITICAL + 1

_LEVELS = {
    "off": _OFF,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
    "0": _OFF,
    "1": logging.ERROR,
    "2": logging.WARNING,
    "3": logging.INFO,
    "4": logging.DEBUG,
    "5": TRACE,
}

_lock = threading.Lock()
_initialized = False


def _parse_level(level: str) -> int:
    return _LEVELS.get(level.strip().lower(), _OFF)


def init_logger(log_level: str | None = None, log_file: str | None = None) -> bool:
    """Configure the package logger once per process.

    A level of ``"off"`` disables output. Logs go to ``log_file`` (appended)
    or to standard error. Returns True only for the call that did the setup.
    """
    global _initialized
    with _lock:
        if _initialized:
            return False
        _initialized = True

        level = log_level if log_level is not None else DEFAULT_LOG_LEVEL
        logger = logging.getLogger(LOGGER_NAME)
        logger.propagate = False
        if level == "off":
            logger.addHandler(logging.NullHandler())
            logger.setLevel(_OFF)
            return True

        handler: logging.Handler
        if log_file is not None:
            try:
                handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            except OSError as exc:
                print(
                    f"WARN: Failed to open log file '{log_file}', falling back to stderr. "
                    f"Error: {exc}",
                    file=sys.stderr,
                )
                handler = logging.StreamHandler(sys.stderr)
        else:
            handler = logging.StreamHandler(sys.stderr)

        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
        logger.setLevel(_parse_level(level))
        return True


def _reset() -> None:
    """Undo the setup so that ``init_logger`` may run again."""
    global _initialized
    with _lock:
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
        _initialized = False