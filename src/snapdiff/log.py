# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/log.py

"""Logging for snapshot diff runs.

Every module logs through a child of the `snapdiff` logger. A run attaches
a file handler on the result directory's log file for its duration; lines
look like `2026-10-18T09:15:02 INFO: Reading raw diffs`.
"""

import inspect
import logging
import os
import sys
import time
from pathlib import Path

from .errors import OutputError

_SNAPDIFF_ROOT_LOGGER = "snapdiff"


class UTCFormatter(logging.Formatter):
    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


def attach_log_file(log_path: Path, *, debug: bool = False) -> logging.Handler:
    """Start appending `snapdiff` log records to `log_path`.

    Returns the handler so the caller can pass it to `detach_log_file`.
    """
    logger = logging.getLogger(_SNAPDIFF_ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    try:
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Could not open log file: {log_path}") from e
    handler.setFormatter(UTCFormatter())
    logger.addHandler(handler)
    return handler


def detach_log_file(handler: logging.Handler) -> None:
    logging.getLogger(_SNAPDIFF_ROOT_LOGGER).removeHandler(handler)
    handler.close()


def get_logger() -> logging.Logger:
    calling_file = os.path.basename(inspect.getframeinfo(sys._getframe(1)).filename)
    if calling_file.endswith(".py"):
        calling_file = calling_file[: -len(".py")]
    return logging.getLogger(_SNAPDIFF_ROOT_LOGGER + "." + calling_file)
