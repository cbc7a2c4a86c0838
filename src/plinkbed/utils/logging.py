"""Logging utilities for plinkbed.

The console sink goes to stdout at INFO by default. Loading a file set logs
one INFO line with its dimensions; paths, header checks and mapping details
are DEBUG.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <8}</level> | {message}"


def console_level(verbose: bool = False, quiet: bool = False) -> str:
    """Console log level for the verbosity flags (verbose wins)."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return "INFO"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> None:
    """Replace loguru's handlers with the plinkbed console (and file) sinks.

    Args:
        verbose: Log DEBUG to the console.
        quiet: Log only warnings and errors to the console.
        log_file: Optional path for a JSON-serialized DEBUG log.
    """
    logger.remove()
    logger.add(
        sys.stdout,
        level=console_level(verbose, quiet),
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    if log_file:
        logger.add(log_file, serialize=True, level="DEBUG")
