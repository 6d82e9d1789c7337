"""
Logging Configuration

Every module logs through logging.getLogger(__name__), so all records end up
under the "ministore" logger. The CLI prints listings and import summaries
on stdout; log records go to stderr unless another stream is given.
"""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "ministore"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach a single handler to the package logger.

    Args:
        verbose: DEBUG level (per-image sizes, query counts)
        quiet: WARNING level (failed items and orphaned uploads only)
        stream: Output stream, stderr by default

    Returns:
        The package logger
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # Re-running the CLI entry points in one process must not duplicate output
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger
