"""Engine logging under the ``campus_ranking`` namespace.

Every engine logger is a child of one package logger. That logger owns the only
stream handler, so its level (``RankingConfig.log_level``) applies to ranking,
search and profile loading alike.

Usage example:
    from campus_ranking.observability import configure_logging, get_logger

    configure_logging("DEBUG")
    get_logger("rank_matrix").info("Ranked %s entities", entity_count)
"""

from __future__ import annotations

import logging
import time

ENGINE_LOGGER_NAME = "campus_ranking"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LOG_LEVEL = "INFO"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class LogLevelError(ValueError):
    """Raised when a log level name is not one the engine supports."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Log level must be one of: {', '.join(LOG_LEVELS)} (got {value!r}).")


class _UtcFormatter(logging.Formatter):
    converter = time.gmtime


def parse_log_level(value: str) -> str:
    """Normalise a log level name (``"debug"`` -> ``"DEBUG"``)."""
    text = value.strip().upper()
    if text not in LOG_LEVELS:
        raise LogLevelError(value)
    return text


def _engine_logger() -> logging.Logger:
    logger = logging.getLogger(ENGINE_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_UtcFormatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(DEFAULT_LOG_LEVEL)
        logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return an engine logger.

    Names outside the engine namespace are placed under it, so
    ``get_logger("search")`` and ``get_logger("campus_ranking.search")`` are the
    same logger. Child loggers carry no handlers of their own.
    """
    engine = _engine_logger()
    if name == ENGINE_LOGGER_NAME:
        return engine
    if not name.startswith(f"{ENGINE_LOGGER_NAME}."):
        name = f"{ENGINE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Set the level shared by every engine logger and return the package logger."""
    logger = _engine_logger()
    logger.setLevel(parse_log_level(level))
    return logger
