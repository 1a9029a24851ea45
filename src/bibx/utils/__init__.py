"""Utility modules for bibx.

Provides:
- logger: get_logger for logging
"""

from bibx.utils.logger import get_logger

__all__ = [
    "get_logger",
]
