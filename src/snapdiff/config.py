# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/config.py

"""Tunables and result directory layout."""

from dataclasses import dataclass
from typing import Final


LOG_FILE: Final = "out.log"
RAW_DIR: Final = "raw"
BUCKETS_DIR: Final = "parallel_diff"
SERIALIZED_DIFF: Final = "serialized_diff"
JSON_DIR: Final = "serialized_json"

EOB: Final = "EOB"
EOF: Final = "EOF"
SENTINELS: Final = frozenset({EOB, EOF})


@dataclass(frozen=True)
class DiffConfig:
    """Settings for one snapshot diff run.

    `level_offset` is added to every record level so that the lowest level
    the producer emits (-513) lands on bucket key 0.
    """
    max_retries: int = 10
    block_size: int = 16 << 10
    level_offset: int = 513
    batch_size: int = 1000
    start_cookie: str = "0"
    gen_json: bool = True
    keep_buckets: bool = False
