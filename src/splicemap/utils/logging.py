"""Console and file logging for the ``splicemap`` logger tree.

Every module logs through ``logging.getLogger(__name__)``, so all records
end up under the ``splicemap`` logger. :func:`setup_logging` attaches the
handlers once per process (the CLI calls it from the command group), with
the console level taken from ``-v``/``-q`` and an optional log file that
always captures DEBUG records such as per-track scales and slot layouts.

:class:`Timer` reports how long parsing, planning and rendering took.

Example:
    >>> from splicemap.utils.logging import setup_logging, Timer
    >>> setup_logging(verbosity=2, log_file="splicemap.log")
    >>> with Timer("Building scene"):
    ...     scene = plot.build()
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

# =============================================================================
# Constants
# =============================================================================

ROOT_LOGGER = "splicemap"

# Plain console and log file records
LOG_LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# RichHandler renders level and time itself
RICH_LINE_FORMAT = "%(message)s"

# -q, default, -v
LEVEL_BY_VERBOSITY = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


# =============================================================================
# Setup Functions
# =============================================================================


def _console_handler(use_rich: bool) -> logging.Handler:
    if use_rich:
        handler: logging.Handler = RichHandler(
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter(RICH_LINE_FORMAT))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT))
    return handler


def setup_logging(
    verbosity: int = 1,
    log_file: Path | str | None = None,
    use_rich: bool = True,
) -> None:
    """Install the console (and optional file) handler on ``splicemap``.

    Repeated calls replace the handlers installed by the previous call.

    Args:
        verbosity: 0 for warnings only, 1 for progress, 2 for debug detail.
            Larger values behave like 2.
        log_file: File receiving every record down to DEBUG.
        use_rich: Render console records with rich; a plain stream
            handler otherwise.
    """
    level = LEVEL_BY_VERBOSITY.get(verbosity, logging.DEBUG)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console = _console_handler(use_rich)
    console.setLevel(level)
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Logger inside the ``splicemap`` tree.

    Names outside the tree (``__main__`` in a script, say) are nested under
    ``splicemap`` so they share its handlers.

    Args:
        name: Usually ``__name__``.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


# =============================================================================
# Timing Utilities
# =============================================================================


class Timer:
    """Context manager that logs how long a block took.

    Example:
        >>> with Timer("Building scene", logger):
        ...     scene = plot.build()
        # Logs: "Building scene completed in 0.12s"
    """

    def __init__(
        self,
        description: str,
        logger: logging.Logger | None = None,
        level: int = logging.INFO,
    ) -> None:
        """Initialize timer.

        Args:
            description: What is being timed.
            logger: Logger for the message (the ``splicemap`` logger if None).
            level: Level of the timing message.
        """
        self.description = description
        self.logger = logger or logging.getLogger(ROOT_LOGGER)
        self.level = level
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> Timer:
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        self.logger.log(self.level, f"{self.description} completed in {self.elapsed:.2f}s")
