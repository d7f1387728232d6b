"""Logging setup for the ledgerkit package."""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Level name (DEBUG, INFO, ...). Defaults to LEDGERKIT_LOG_LEVEL,
            then WARNING.

    Returns:
        The configured ``ledgerkit`` logger
    """
    global _handler

    level_name = (level or os.environ.get("LEDGERKIT_LOG_LEVEL") or "WARNING").upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level_name}'")

    logger = logging.getLogger("ledgerkit")
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
    logger.setLevel(numeric_level)
    return logger


def reset_logging() -> None:
    """Remove the handler installed by ``configure_logging``."""
    global _handler

    if _handler is not None:
        logging.getLogger("ledgerkit").removeHandler(_handler)
        _handler = None
