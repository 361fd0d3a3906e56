"""Logging setup for url_hasher.

Every module logs through a child of the ``url_hasher`` logger
(:func:`get_logger`). Output goes to stderr so the digest lines the CLI
prints on stdout stay machine readable; a rotating log file is optional.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "url_hasher"

_LevelT = Union[int, str]


def _formatted(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Point the package logger at stderr and, with *log_file*, a 5 MiB x 3 rotating file."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    lg.addHandler(_formatted(logging.StreamHandler(sys.stderr), log_format))
    if log_file is not None:
        rotating = RotatingFileHandler(
            str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        lg.addHandler(_formatted(rotating, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "WARNING",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Shortcut used by the CLI: replace handlers and apply *level*."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger or its child ``url_hasher.<name>``."""
    return logging.getLogger(LOGGER_NAME if not name else f"{LOGGER_NAME}.{name}")


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "get_logger", "DEFAULT_FORMAT", "LOGGER_NAME"]
