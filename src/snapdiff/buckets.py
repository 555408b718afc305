# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/buckets.py

"""Reorder diff records into replay-safe order.

The producer tags every record with a level. Replaying records grouped by
ascending level is safe, so records are spread into one bucket file per
level and the buckets are concatenated in key order.
"""

import shutil
from pathlib import Path
from typing import Iterator, TextIO

from .errors import MalformedStreamError, OutputError
from .log import get_logger
from .records import is_sentinel, normalize_level, parse_record, tokenize

log = get_logger()


def _open_text(path: Path, mode: str) -> TextIO:
    # Paths in the stream are raw bytes; surrogateescape keeps them intact.
    return open(path, mode, encoding="utf-8", errors="surrogateescape",
                newline="\n")


class BucketStore:
    """Owns one open file per normalized level until `close` is called."""

    def __init__(self, buckets_dir: Path):
        self.buckets_dir = buckets_dir
        self._files: dict[int, TextIO] = {}

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, key: int) -> bool:
        return key in self._files

    def __enter__(self) -> "BucketStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def path(self, key: int) -> Path:
        return self.buckets_dir / str(key)

    def append(self, key: int, payload_line: str) -> None:
        bucket = self._files.get(key)
        if bucket is None:
            path = self.path(key)
            try:
                bucket = _open_text(path, "w+")
            except OSError as e:
                log.error(f"Could not open file: {path}")
                raise OutputError(f"Could not open file: {path}") from e
            log.info(f"Writing to bucket file: {path}")
            self._files[key] = bucket
        try:
            bucket.write(payload_line + "\n")
        except OSError as e:
            raise OutputError(f"Could not write file: {self.path(key)}") from e

    def items(self) -> Iterator[tuple[int, TextIO]]:
        """Yield `(key, file)` in ascending key order."""
        for key in sorted(self._files):
            yield key, self._files[key]

    def close(self, remove: bool = False) -> None:
        """Close every bucket file, deleting them when `remove` is set."""
        while self._files:
            key, bucket = self._files.popitem()
            bucket.close()
            if remove:
                self.path(key).unlink(missing_ok=True)


def bucketize_diff(raw_dir: Path, page_count: int, buckets: BucketStore,
                   level_offset: int = 513) -> None:
    """Append the payload of every raw record to its level's bucket."""
    for page_num in range(page_count):
        raw_path = raw_dir / str(page_num)
        try:
            raw = _open_text(raw_path, "r")
        except OSError as e:
            log.error(f"Could not open file: {raw_path}")
            raise MalformedStreamError(f"Could not open file: {raw_path}") from e

        log.info(f"Bucketizing diff from raw file: {raw_path}")

        with raw:
            try:
                for line in raw:
                    if not tokenize(line):
                        continue
                    record = parse_record(line)
                    payload = record.payload_line
                    if is_sentinel(payload):
                        # Anything after EOB/EOF was already consumed.
                        break
                    buckets.append(normalize_level(record.level, level_offset),
                                   payload)
            except (OSError, UnicodeError) as e:
                log.error(f"Error reading file: {raw_path}")
                raise MalformedStreamError(f"Error reading file: {raw_path}") from e


def serialize_buckets(buckets: BucketStore, out_path: Path,
                      keep_buckets: bool = False) -> None:
    """Concatenate buckets in ascending level order into `out_path`.

    Every bucket is closed before returning, whether or not writing
    succeeded.
    """
    try:
        try:
            out = _open_text(out_path, "w")
        except OSError as e:
            log.error(f"Could not open file: {out_path}")
            raise OutputError(f"Could not open file: {out_path}") from e

        log.info(f"Writing to serialized diff file: {out_path}")
        with out:
            for _, bucket in buckets.items():
                bucket.seek(0)
                shutil.copyfileobj(bucket, out)
    finally:
        buckets.close(remove=not keep_buckets)
