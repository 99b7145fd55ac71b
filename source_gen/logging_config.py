"""Logging setup for source_gen.

Every module asks for its logger through :func:`get_logger`. Handlers are only
installed by :func:`configure_logging`, which the CLI calls once at startup.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "source_gen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger namespaced under ``source_gen``.

    Args:
        name: Module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO", verbose: bool = False, console: Console | None = None
) -> logging.Logger:
    """Install a rich handler on the package logger.

    Args:
        level: Log level name used when ``verbose`` is off.
        verbose: Force DEBUG level and show source locations.
        console: Console to log to (defaults to stderr).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else level.upper())

    logger.debug("Logging configured (level=%s)", logging.getLevelName(logger.level))
    return logger
