"""Logging setup for lexgen.

Every module gets its logger through ``get_logger(__name__)``. Nothing is
printed until ``setup_logging`` installs a handler, so library users keep
control of their own logging configuration.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "lexgen"

_VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the lexgen namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger named ``lexgen.<...>``.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def verbosity_to_level(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level."""
    if verbosity <= 0:
        return _VERBOSITY_LEVELS[0]
    return _VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)


def setup_logging(verbosity: int = 0, console: Console | None = None) -> logging.Logger:
    """Configure the lexgen logger with a rich handler on stderr.

    Calling this more than once replaces the previous handler.

    Args:
        verbosity: Number of ``-v`` flags given on the command line.
        console: Console to log to. Defaults to a stderr console.

    Returns:
        The configured root lexgen logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = verbosity_to_level(verbosity)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbosity > 1,
        show_path=verbosity > 2,
        markup=False,
        rich_tracebacks=verbosity > 1,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    logger.debug(f"Logging configured at level {logging.getLevelName(level)}")
    return logger
