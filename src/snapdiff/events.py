# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/events.py

"""Translate serialized diff records into JSON change events."""

import json
from pathlib import Path
from typing import Callable, Final, Iterable, Iterator

from .errors import MalformedStreamError, OutputError
from .log import get_logger
from .metadata import get_file_metadata, live_path
from .records import split_op, tokenize
from .types import (
    ChangeEvent,
    DeleteEvent,
    EntryEvent,
    FileStat,
    RenameEvent,
    SymlinkEvent,
)

log = get_logger()

ENTITY_TYPES: Final = {"FILE": "file", "DIR": "dir", "SYM": "symlink"}


class EventMapper:
    """Classify serialized records and enrich them with live metadata."""

    def __init__(self, snap_dir: Path | str,
                 stat_fn: Callable[[str], FileStat] = get_file_metadata):
        self.snap_dir = snap_dir
        self.stat_fn = stat_fn

    def _stat(self, path: str) -> FileStat | None:
        try:
            return self.stat_fn(live_path(self.snap_dir, path))
        except OSError as e:
            log.error(f"Could not stat file: {path} ({e.strerror})")
            return None

    def classify(self, tokens: list[str]) -> ChangeEvent | None:
        """Build the event for one record, or None for unknown entities."""
        if len(tokens) < 2:
            raise MalformedStreamError(f"Truncated record: {' '.join(tokens)!r}")

        entity, op = split_op(tokens[0])
        path = tokens[1]
        object_type = ENTITY_TYPES.get(entity)
        if object_type is None:
            return None

        if op == "DELETE":
            return DeleteEvent(object_type=object_type, path=path)

        if object_type == "symlink":
            created = "C" in op
            target = None
            if created:
                if len(tokens) < 3:
                    raise MalformedStreamError(f"Symlink without target: {path!r}")
                target = tokens[2]
            return SymlinkEvent(
                path=path,
                created=created,
                stat_changed="S" in op,
                target=target,
                stat=self._stat(path),
            )

        if op == "RENAME":
            if len(tokens) < 3:
                raise MalformedStreamError(f"Rename without destination: {path!r}")
            return RenameEvent(path_old=path, path_new=tokens[2])

        return EntryEvent(
            type=object_type,
            path=path,
            created="C" in op,
            modified="M" in op,
            stat_changed="S" in op,
            xattr_changed="X" in op,
            stat=self._stat(path),
        )

    def batches(self, lines: Iterable[str],
                batch_size: int = 1000) -> Iterator[list[ChangeEvent]]:
        """Yield lists of at most `batch_size` events; never an empty one."""
        batch: list[ChangeEvent] = []
        for line in lines:
            tokens = tokenize(line)
            if not tokens:
                continue
            event = self.classify(tokens)
            if event is None:
                continue
            batch.append(event)
            if len(batch) == batch_size:
                yield batch
                batch = []
        if batch:
            yield batch


def write_json_batch(events: list[ChangeEvent], json_path: Path) -> None:
    try:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump([e.to_json() for e in events], f, indent=2, sort_keys=True)
            f.write("\n")
    except OSError as e:
        log.error(f"Could not open file: {json_path}")
        raise OutputError(f"Could not write file: {json_path}") from e


def generate_json(serialized_path: Path, json_dir: Path, mapper: EventMapper,
                  batch_size: int = 1000) -> int:
    """Write `json_dir/0.json`, `1.json`, ... and return how many."""
    try:
        serial = open(serialized_path, encoding="utf-8",
                      errors="surrogateescape", newline="\n")
    except OSError as e:
        log.error(f"Could not open file: {serialized_path}")
        raise MalformedStreamError(f"Could not open file: {serialized_path}") from e

    log.info(f"JSONizing diffs from: {serialized_path}")

    count = 0
    with serial:
        for batch in mapper.batches(serial, batch_size):
            json_path = json_dir / f"{count}.json"
            log.info(f"Writing to json file: {json_path}")
            write_json_batch(batch, json_path)
            count += 1
    return count
