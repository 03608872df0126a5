"""
Logging setup shared by the API and the import pipeline.

Modules obtain loggers with ``get_logger(__name__)``; configuration happens
once, from the application entrypoint, through ``configure_logging()``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

IMPORT = "[IMPORT]"
FETCHER = "[FETCHER]"
INDEX = "[INDEX]"
CLASSIFY = "[CLASSIFY]"


def configure_logging(
    level: int | str = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO = sys.stdout,
) -> None:
    """Attach a single stream handler to the root logger and set its level.

    Calling this more than once only updates the level.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
