# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/records.py

"""Parsing helpers for the line-oriented diff stream.

A raw line is `<level> <objectId> <payload...>` separated by whitespace.
The payload starts with an `ENTITY_OPCODE` tag followed by a path and, for
renames and created symlinks, one more path.
"""

import re

from .config import SENTINELS
from .errors import MalformedStreamError
from .types import DiffRecord

_LEVEL_RE = re.compile(r"[+-]?[0-9]+")
# Only ASCII whitespace separates tokens; paths may hold any other byte.
_SEPARATOR_RE = re.compile(r"[ \t\n\r\f\v]+")
_SEPARATORS = " \t\n\r\f\v"


def tokenize(line: str) -> list[str]:
    """Split a line on ASCII whitespace only."""
    line = line.strip(_SEPARATORS)
    if not line:
        return []
    return _SEPARATOR_RE.split(line)


def parse_record(line: str) -> DiffRecord:
    """Split a raw stream line into level, object id and payload."""
    tokens = tokenize(line)
    if len(tokens) < 3:
        raise MalformedStreamError(f"Truncated diff record: {line!r}")
    if not _LEVEL_RE.fullmatch(tokens[0]):
        raise MalformedStreamError(f"Bad level {tokens[0]!r} in record: {line!r}")
    return DiffRecord(level=int(tokens[0]), object_id=tokens[1],
                      payload=tuple(tokens[2:]))


def normalize_level(level: int, offset: int) -> int:
    """Shift a signed level onto the non-negative bucket key space."""
    key = level + offset
    if key < 0:
        raise MalformedStreamError(
            f"Level {level} is below the supported minimum {-offset}")
    return key


def is_sentinel(payload_line: str) -> bool:
    return payload_line in SENTINELS


def scan_page_line(line: str) -> tuple[str, str]:
    """Return `(marker, cookie)` for one line of a copied page.

    Reads at most three tokens. `marker` is the last token read and
    `cookie` is the one read just before it, so on a full line they are the
    payload tag and the object id. Short lines leave earlier values in
    place rather than failing.
    """
    tokens = tokenize(line)
    marker = ""
    cookie = ""
    for i in range(3):
        cookie = marker
        if i < len(tokens):
            marker = tokens[i]
    return marker, cookie


def split_op(tag: str) -> tuple[str, str]:
    """Split `FILE_CM` into `("FILE", "CM")` on the first underscore."""
    entity, sep, op = tag.partition("_")
    if not sep:
        # No separator: the whole tag doubles as the opcode.
        return tag, tag
    return entity, op
