# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/conftest.py
"""Pytest configuration for snapdiff tests."""

import pytest

from snapdiff.types import FileStat, Timespec
from tests.fixtures.snapdiff_stream_fixture import create_stream_environment


TWO_PAGES = {
    "0": [
        "3 c1 FILE_CM /docs/report.txt",
        "-2 c2 DIR_C /docs",
        "5 c3 FILE_DELETE /old/gone.txt",
        "0 c3 EOB",
    ],
    "c3": [
        "-2 c4 SYM_CM /docs/latest /docs/report.txt",
        "3 c5 DIR_RENAME /tmp/a /tmp/b",
        "0 c5 EOF",
    ],
}

LIVE_FILES = {
    "docs/report.txt": "quarterly numbers\n",
}


@pytest.fixture
def stream_env(tmp_path):
    """A two-page stream with matching live files; link created below."""
    env = create_stream_environment(tmp_path, TWO_PAGES, LIVE_FILES)
    (env.live_root / "docs" / "latest").symlink_to("report.txt")
    return env


@pytest.fixture
def fixed_stat():
    """A stat function that returns the same metadata for every path."""
    calls = []

    def stat_fn(path: str) -> FileStat:
        calls.append(path)
        return FileStat(
            size=42,
            atime=Timespec(sec=100, nsec=1),
            ctime=Timespec(sec=200, nsec=2),
            mtime=Timespec(sec=300, nsec=3),
        )

    stat_fn.calls = calls
    return stat_fn
