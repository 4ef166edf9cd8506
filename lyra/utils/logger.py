"""
Logging for LYRA.

Every module logs through a child of the ``lyra`` logger, which writes to
stdout and does not propagate to the root logger (uvicorn installs its own
handlers there). The level comes from ``LYRA_LOG_LEVEL`` (``LOG_LEVEL`` is
still honored) and can be changed at runtime from the ``logging.level`` key
of the YAML config.
"""
import logging
import os
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LEVEL = os.getenv("LYRA_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO"


def _normalize_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


logger = logging.getLogger("lyra")

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(_handler)

logger.propagate = False


def set_log_level(level: Union[str, int]) -> int:
    """
    Set the level of the ``lyra`` logger and its handlers.

    Args:
        level: Level name ("debug", "INFO", ...) or numeric level

    Returns:
        The numeric level applied

    Raises:
        ValueError: If the name is not a logging level
    """
    numeric = _normalize_level(level)
    logger.setLevel(numeric)
    for handler in logger.handlers:
        handler.setLevel(numeric)
    return numeric


try:
    set_log_level(DEFAULT_LEVEL)
except ValueError:
    set_log_level(logging.INFO)
    logger.warning(f"Ignoring unknown log level {DEFAULT_LEVEL!r}, using INFO")


def get_logger(name: str = None) -> logging.Logger:
    """Child of the ``lyra`` logger, e.g. ``get_logger("api.server")``."""
    if name:
        return logging.getLogger(f"lyra.{name}")
    return logger
