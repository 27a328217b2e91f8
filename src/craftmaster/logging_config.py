import logging
import os
import sys
from typing import Optional, TextIO

LOGGER_NAME = "craftmaster"
LEVEL_ENV_VAR = "CM_LOG_LEVEL"


def resolve_level(default_level: int = logging.INFO) -> int:
    """Level named by CM_LOG_LEVEL, or `default_level` when unset or unknown."""
    level_name = os.getenv(LEVEL_ENV_VAR)
    if not level_name:
        return default_level
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else default_level


def configure_logging(
    default_level: int = logging.INFO,
    stream: Optional[TextIO] = None,
    propagate: bool = False,
) -> logging.Logger:
    """Attach one formatted handler to the engine's logger namespace.

    Only the ``craftmaster`` logger is touched; the host application's root
    logger is left alone. Calling this again replaces the handler installed
    by the previous call.
    """
    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler.set_name(LOGGER_NAME)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(default_level))
    for h in list(logger.handlers):
        if h.get_name() == LOGGER_NAME:
            logger.removeHandler(h)
    logger.addHandler(handler)
    logger.propagate = propagate
    return logger
