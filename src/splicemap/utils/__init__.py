"""Utility functions for SpliceMap.

Example:
    >>> from splicemap.utils import setup_logging, Timer
    >>> setup_logging(verbosity=2)
"""

from splicemap.utils.logging import Timer, get_logger, setup_logging

__all__ = [
    "Timer",
    "get_logger",
    "setup_logging",
]
