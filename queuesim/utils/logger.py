"""Logging setup shared by all simulator components."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str, level: Optional[Union[str, int]] = None,
                 verbose: bool = False) -> logging.Logger:
    """Create (or fetch) a configured logger.

    Args:
        name: Logger name, usually the class name of the caller
        level: Logging level name or number; an already configured
            logger keeps its level when omitted, a new one gets INFO
        verbose: Force DEBUG level

    Returns:
        Logger with a single stream handler
    """
    logger = logging.getLogger(name)

    if verbose:
        level = "DEBUG"
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if level is not None:
        logger.setLevel(level)
    elif not logger.handlers:
        logger.setLevel(logging.INFO)

    # Avoid stacking handlers when the same component is built repeatedly
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
