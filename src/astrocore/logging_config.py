"""
astrocore.logging_config — Logging Setup
==========================================

Modules obtain their logger with::

    from .logging_config import get_logger
    logger = get_logger(__name__)

The library itself never installs handlers; applications (render loop,
scripts, tests) call :func:`configure_logging` once at startup.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Configure root logging for an application using astrocore.

    Parameters
    ----------
    level : int — logging level (e.g. ``logging.DEBUG``)
    log_file : str or None — optional file to log to in addition to stdout
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (typically ``__name__``)."""
    return logging.getLogger(name)


logging.getLogger("astrocore").addHandler(logging.NullHandler())
