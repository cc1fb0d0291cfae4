"""Logging setup for the roer CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "roer"


def configure_logging(verbose: bool = False, silent: bool = False) -> logging.Logger:
    """Attach a stderr ``RichHandler`` to the ``roer`` logger.

    ``verbose`` enables DEBUG output (response bodies included); ``silent``
    keeps only errors. Calling this again replaces the previous handler.
    """
    if verbose:
        level = logging.DEBUG
    elif silent:
        level = logging.ERROR
    else:
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_roer_handler", False):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=False,
    )
    handler._roer_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging"]
