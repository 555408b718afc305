# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# snapdiff/src/snapdiff/diff.py

"""Main snapshot diff pipeline.

Stages run strictly one after another, each leaving its output in the
result directory:

    raw/0, raw/1, ...          pages copied from the stream
    parallel_diff/<level>      one bucket per level, removed once serialized
    serialized_diff            all records in replay-safe order
    serialized_json/<n>.json   change events, at most 1000 per document
    out.log                    run log

A failed run leaves whatever the finished stages produced in place.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

from .buckets import BucketStore, bucketize_diff, serialize_buckets
from .config import (
    BUCKETS_DIR,
    JSON_DIR,
    LOG_FILE,
    RAW_DIR,
    SERIALIZED_DIFF,
    DiffConfig,
)
from .errors import (
    OutputError,
    ResultDirError,
    SnapshotDiffError,
    SnapshotDirError,
)
from .events import EventMapper, generate_json
from .log import attach_log_file, detach_log_file, get_logger
from .metadata import get_file_metadata
from .stream import PageSource, read_raw_diff
from .types import DiffResult, FileStat

log = get_logger()


@contextmanager
def _stage(start_msg: str, failure_msg: str) -> Iterator[None]:
    log.info(start_msg)
    try:
        yield
    except SnapshotDiffError as e:
        log.error(f"{failure_msg}: {e}")
        raise


def _make_dir(path: Path) -> Path:
    try:
        path.mkdir()
    except OSError as e:
        log.error(f"Unable to create directory: {path}")
        raise OutputError(f"Unable to create directory: {path}") from e
    return path


class SnapshotDiff:
    """Extract the ordered diff between two snapshots into a result directory."""

    def __init__(self, snap_dir: Path | str, snap1: str, snap2: str,
                 result_dir: Path | str, config: DiffConfig = DiffConfig(),
                 source: PageSource | None = None,
                 stat_fn: Callable[[str], FileStat] = get_file_metadata):
        self.snap_dir = Path(snap_dir)
        self.snap1 = snap1
        self.snap2 = snap2
        self.result_dir = Path(result_dir)
        self.config = config
        self.source = source or PageSource(snap_dir, snap1, snap2)
        self.stat_fn = stat_fn

        if not self.result_dir.is_dir():
            raise ResultDirError(
                f"Result directory {result_dir} is not a directory.")
        if any(self.result_dir.iterdir()):
            raise ResultDirError(f"Result directory {result_dir} is not empty.")

    def run(self, debug: bool = False) -> DiffResult:
        """Run every stage; raises SnapshotDiffError on the first failure."""
        handler = attach_log_file(self.result_dir / LOG_FILE, debug=debug)
        try:
            return self._run()
        finally:
            detach_log_file(handler)

    def _run(self) -> DiffResult:
        # The Windows stream root is a share, not a listable directory.
        if not self.source.windows and not self.snap_dir.is_dir():
            log.error(f"Snapshot directory {self.snap_dir} is not a directory.")
            raise SnapshotDirError(
                f"Snapshot directory {self.snap_dir} is not a directory.")

        log.info("Input parameters : ")
        log.info(f"snapDir: {self.snap_dir}")
        log.info(f"snap1: {self.snap1}")
        log.info(f"snap2: {self.snap2}")
        log.info(f"resultDir: {self.result_dir}")

        raw_dir = _make_dir(self.result_dir / RAW_DIR)
        with _stage("Reading raw diffs", "Issue in reading raw diff"):
            page_count = read_raw_diff(self.source, raw_dir, self.config)

        with _stage("Generating bucketized diffs", "Issue in bucketizing diff"):
            buckets_dir = _make_dir(self.result_dir / BUCKETS_DIR)
            with BucketStore(buckets_dir) as buckets:
                bucketize_diff(raw_dir, page_count, buckets,
                               self.config.level_offset)
                bucket_count = len(buckets)
                log.info("Generating serialized diffs")
                serialize_buckets(buckets, self.result_dir / SERIALIZED_DIFF,
                                  self.config.keep_buckets)

        json_dir = _make_dir(self.result_dir / JSON_DIR)
        json_count = 0
        if self.config.gen_json:
            with _stage("Generating json file", "Issue in generating json"):
                mapper = EventMapper(self.snap_dir, self.stat_fn)
                json_count = generate_json(self.result_dir / SERIALIZED_DIFF,
                                           json_dir, mapper,
                                           self.config.batch_size)

        log.info("Snapshot diff completed successfully")
        return DiffResult(
            result_dir=str(self.result_dir),
            page_count=page_count,
            bucket_count=bucket_count,
            json_count=json_count,
        )


def get_snapshot_diff(snap_dir: Path | str, snap1: str, snap2: str,
                      result_dir: Path | str, gen_json: bool = True) -> int:
    """Run the pipeline; 0 on success, 1 on any failure."""
    try:
        SnapshotDiff(snap_dir, snap1, snap2, result_dir,
                     DiffConfig(gen_json=gen_json)).run()
    except SnapshotDiffError as e:
        log.error(f"Snapshot diff failed: {e}")
        return 1
    return 0
