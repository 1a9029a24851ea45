"""Minimal logging utilities for bibx.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from bibx.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("scanning refs.bib")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "bibx." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'bibx.mymodule'
    """
    if not (name == "bibx" or name.startswith("bibx.")):
        name = f"bibx.{name}"
    return logging.getLogger(name)
