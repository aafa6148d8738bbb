"""Observability and logging facades."""

from .logging import (
    DEFAULT_LOG_LEVEL,
    LOG_LEVELS,
    configure_logging,
    get_logger,
    level_from_verbosity,
    log_context,
)

__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LOG_LEVELS",
    "configure_logging",
    "get_logger",
    "level_from_verbosity",
    "log_context",
]
