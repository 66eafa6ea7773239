"""Logging setup backed by rich."""

import logging
from typing import Union

from rich.logging import RichHandler


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Route the package loggers through a rich console handler.

    The library never calls this itself; applications and scripts do.
    """
    logger = logging.getLogger("voice_biomarkers")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger
