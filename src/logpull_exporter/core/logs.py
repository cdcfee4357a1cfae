"""Logging helpers shared by the core and its adapters."""

import logging
import sys

ROOT_LOGGER = "logpull_exporter"

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def parse_level(level: str | int) -> int:
    """Turn a level name (case-insensitive) or number into a numeric level.

    Raises:
        ValueError: If the level name is unknown.
    """
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level: {level!r}")
    return numeric


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the package logger.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Log level name (e.g., "DEBUG") or numeric level.

    Raises:
        ValueError: If the level name is unknown.
    """
    level = parse_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)


def log_exception(message: str, logger: logging.Logger | None = None) -> None:
    """Log the exception currently being handled, with traceback.

    Must be called from inside an ``except`` block.
    """
    (logger or logging.getLogger(ROOT_LOGGER)).exception(message)
