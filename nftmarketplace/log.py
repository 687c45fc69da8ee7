"""Console logging for the ``nftmarketplace`` logger tree."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "nftmarketplace"


def init_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """Attach a ``RichHandler`` to the package logger at *level*.

    Calling again replaces the handler instead of stacking another one,
    so repeated CLI invocations in one process log each line once.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    return logger
