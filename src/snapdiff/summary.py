# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/summary.py

"""Read a finished result directory back for reporting."""

import json
from collections import Counter
from pathlib import Path
from typing import Iterator

from .config import JSON_DIR
from .errors import ResultDirError


def json_documents(result_dir: Path | str) -> list[Path]:
    """JSON documents of a run, in the order they were written."""
    json_dir = Path(result_dir) / JSON_DIR
    if not json_dir.is_dir():
        raise ResultDirError(f"No {JSON_DIR} directory in {result_dir}")
    return sorted(json_dir.glob("*.json"), key=lambda p: int(p.stem))


def load_events(result_dir: Path | str) -> Iterator[dict]:
    for doc in json_documents(result_dir):
        yield from json.loads(doc.read_text(encoding="utf-8"))


def summarize(events: list[dict]) -> dict[str, Counter]:
    """Count events by type, and deletions by the kind of object removed."""
    return {
        "by_type": Counter(e["type"] for e in events),
        "deleted": Counter(e["object_type"] for e in events
                           if e["type"] == "delete"),
        "created": Counter(e["type"] for e in events if e.get("created")),
    }
