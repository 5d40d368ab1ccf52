"""Observability helpers."""

from .logging import (
    DEFAULT_LOG_LEVEL,
    LogLevelError,
    configure_logging,
    get_logger,
    parse_log_level,
)

__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LogLevelError",
    "configure_logging",
    "get_logger",
    "parse_log_level",
]
