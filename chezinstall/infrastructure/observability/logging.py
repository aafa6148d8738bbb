"""Logging utilities for chezinstall.

This module provides centralised logging configuration and helpers for
leveled, contextual logging throughout the installer. Verbosity follows the
``LOG_LEVEL`` convention of release install scripts::

    0 = critical, 1 = error, 2 = info, 3 = debug
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, TextIO


# ---------------------------------------------------------------------------
# LOG_LEVEL mapping
# ---------------------------------------------------------------------------

LOG_LEVELS: dict[int, int] = {
    0: logging.CRITICAL,
    1: logging.ERROR,
    2: logging.INFO,
    3: logging.DEBUG,
}

DEFAULT_LOG_LEVEL = 2

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


def level_from_verbosity(verbosity: int) -> int:
    """Translate a ``LOG_LEVEL`` value (0-3) into a :mod:`logging` level.

    Values outside the range are clamped.
    """
    clamped = max(0, min(3, int(verbosity)))
    return LOG_LEVELS[clamped]


# ---------------------------------------------------------------------------
# Context variables for structured logging
# ---------------------------------------------------------------------------

_log_context: ContextVar[dict[str, Any]] = ContextVar(
    "log_context", default={})


class ContextualFormatter(logging.Formatter):
    """Formatter that prints lowercase level names and appends context fields."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname_short = _LEVEL_NAMES.get(
            record.levelno, record.levelname.lower())
        message = super().format(record)
        ctx = _log_context.get()
        if ctx:
            ctx_str = " ".join(f"{k}={v}" for k, v in ctx.items())
            message = f"{message} [{ctx_str}]"
        return message


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Temporarily add context fields to all log messages.

    Usage::

        with log_context(tag="v2.52.0", platform="linux-glibc_amd64"):
            logger.info("installing")  # message includes context

    Fields are merged with any existing context and restored on exit.
    """
    current = _log_context.get()
    merged = {**current, **fields}
    token = _log_context.set(merged)
    try:
        yield
    finally:
        _log_context.reset(token)


# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

LOG_FORMAT = "%(levelname_short)s %(message)s"

_handler: logging.Handler | None = None


def configure_logging(
    verbosity: int = DEFAULT_LOG_LEVEL,
    third_party_level: int = logging.WARNING,
    stream: TextIO | None = None,
) -> None:
    """Configure the ``chezinstall`` logger hierarchy.

    Unlike a one-shot setup this may be called repeatedly (the CLI does so
    once per invocation); the previous handler is replaced rather than
    duplicated.

    Args:
        verbosity: ``LOG_LEVEL`` value, 0 (critical only) to 3 (debug).
        third_party_level: Log level for third-party libraries (default WARNING).
        stream: Output stream; defaults to ``sys.stderr`` at call time.
    """
    global _handler

    logger = logging.getLogger("chezinstall")
    logger.setLevel(level_from_verbosity(verbosity))
    logger.propagate = False

    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    logger.addHandler(_handler)

    # Quieten noisy third-party loggers
    for name in ("urllib3", "requests", "charset_normalizer"):
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given name.

    If configure_logging() has not been called, the default verbosity is
    applied so the logger is usable.

    Args:
        name: Name of the logger (typically __name__).

    Returns:
        A logging.Logger instance.
    """
    if _handler is None:
        configure_logging()
    return logging.getLogger(name)
