"""Logging setup for the command-line scripts."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """Send log records to stdout, and to ``log_file`` when given.

    ``level`` may be a number or a name such as ``"debug"``. The level applies to
    the ``movetree`` loggers and to the calling script; third-party libraries
    stay at WARNING.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    logging.getLogger("movetree").setLevel(level)
    for name in ("gymnasium", "numpy"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
