"""Logging setup for verbose mode."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s > %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure the rci logger to write through rich on standard error.

    Verbose mode logs everything down to DEBUG; otherwise only errors are
    shown so that standard output stays reserved for the message.
    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        log_time_format="%H:%M:%S.%f",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("rci")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)
    logger.propagate = False
