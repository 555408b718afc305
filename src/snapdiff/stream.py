# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/stream.py

"""Paginated snapshot diff stream reader.

The storage platform publishes the diff between two snapshots as a series
of pages. Each page is addressed by the snapshot pair and a continuation
cookie taken from the previous page's content. Pages may not be published
yet when first opened, and reads occasionally fail mid-page; both are
retried a bounded number of times.
"""

import os
import sys
from pathlib import Path
from typing import BinaryIO

from .config import EOB, EOF, SENTINELS, DiffConfig
from .errors import (
    MalformedStreamError,
    OutputError,
    PageUnavailableError,
    StreamReadError,
)
from .log import get_logger
from .records import scan_page_line

log = get_logger()


class PageSource:
    """Addresses the pages of one snapshot pair's diff stream."""

    def __init__(self, snap_dir: Path | str, snap1: str, snap2: str,
                 windows: bool | None = None):
        self.snap_dir = str(snap_dir)
        self.snap1 = snap1
        self.snap2 = snap2
        self.windows = sys.platform == "win32" if windows is None else windows

    def page_name(self, cookie: str) -> str:
        key = f"{self.snap1}^{self.snap2}^{cookie}"
        if self.windows:
            # Served as an alternate data stream of the share root.
            return f"{self.snap_dir}:snapdiff.{key}"
        return os.path.join(self.snap_dir, key)

    def open_page(self, cookie: str) -> BinaryIO:
        return open(self.page_name(cookie), "rb")


def open_stream_unreliable(source: PageSource, cookie: str,
                           max_retries: int = 10) -> BinaryIO:
    """Open one page, retrying while the producer has not published it.

    Only a not-found error is retried, immediately and at most
    `max_retries` attempts in total. Anything else fails at once.
    """
    name = source.page_name(cookie)
    log.info(f"Opening snapdiff stream: {name}")

    for attempt in range(max_retries):
        try:
            return source.open_page(cookie)
        except FileNotFoundError as e:
            log.error(f"Snapshot diff not opened: {name}, retrying...({attempt})")
            log.error(f"Operation returned {e.strerror}")
        except OSError as e:
            log.error(f"Could not open snapshot diff: {name}")
            log.error(f"Error: {e.strerror}")
            raise PageUnavailableError(f"Could not open snapshot diff: {name}") from e

    log.error(f"Could not open snapshot diff: {name}")
    raise PageUnavailableError(
        f"Snapshot diff {name} not available after {max_retries} attempts")


def _copy_page(stream: BinaryIO, local: BinaryIO, block_size: int) -> bool:
    """Copy `stream` to `local` block by block; False if a read failed."""
    while True:
        try:
            block = stream.read(block_size)
        except OSError as e:
            log.error(f"Read failed: {e}")
            return False
        if not block:
            return True
        local.write(block)


def _scan_page(local_path: Path, cookie: str) -> tuple[str | None, str]:
    """Find the sentinel of a copied page and the cookie that follows it.

    Returns `(sentinel, cookie)`; `sentinel` is None when the page holds no
    `EOB`/`EOF` line, in which case `cookie` is the last one seen.
    """
    try:
        with open(local_path, encoding="utf-8", errors="surrogateescape",
                  newline="\n") as local:
            for line in local:
                marker, candidate = scan_page_line(line)
                if marker in SENTINELS:
                    return marker, cookie
                cookie = candidate
    except OSError as e:
        log.error(f"Error reading file: {local_path}")
        raise MalformedStreamError(f"Error reading file: {local_path}") from e
    return None, cookie


def read_raw_diff(source: PageSource, raw_dir: Path,
                  config: DiffConfig = DiffConfig()) -> int:
    """Copy every page of the stream into `raw_dir/0`, `raw_dir/1`, ...

    Returns the number of pages copied.
    """
    page_num = 0
    cookie = config.start_cookie
    read_retries = 0

    while True:
        stream = open_stream_unreliable(source, cookie, config.max_retries)
        local_path = raw_dir / str(page_num)

        try:
            local = open(local_path, "wb")
        except OSError as e:
            stream.close()
            log.error(f"Could not open file: {local_path}")
            raise OutputError(f"Could not open file: {local_path}") from e

        log.info(f"Saving raw chunk in file: {local_path}")
        log.info(f"Reading snapdiff: {source.page_name(cookie)}")

        with stream, local:
            try:
                clean = _copy_page(stream, local, config.block_size)
            except OSError as e:
                log.error(f"Could not write file: {local_path}")
                raise OutputError(f"Could not write file: {local_path}") from e

        if not clean:
            read_retries += 1
            if read_retries >= config.max_retries:
                log.error("Read snapdiff failed: exceeded maximum retries.")
                raise StreamReadError(
                    f"Reading {source.page_name(cookie)} failed "
                    f"{read_retries} times")
            log.error(f"Reading snapdiff stream returned bad: "
                      f"{source.page_name(cookie)}, reopening and "
                      f"retrying...({read_retries})")
            continue

        read_retries = 0
        sentinel, next_cookie = _scan_page(local_path, cookie)

        if sentinel == EOF:
            return page_num + 1
        if sentinel == EOB:
            page_num += 1
        elif next_cookie == cookie:
            log.error(f"No progress reading snapdiff page: {local_path}")
            raise MalformedStreamError(
                f"Page {local_path} has no EOB/EOF and no new cookie")
        cookie = next_cookie
