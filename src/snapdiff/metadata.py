# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/metadata.py

"""Live filesystem metadata for changed paths."""

import os
from pathlib import Path

from .types import FileStat, Timespec


def live_path(snap_dir: Path | str, path: str) -> str:
    """Map a diff path back onto the filesystem the snapshots were taken of.

    The snapshot stream root sits two directory levels below the live
    filesystem root.
    """
    return os.path.join(str(snap_dir), os.pardir, os.pardir, path.lstrip("/"))


def get_file_metadata(path: str) -> FileStat:
    """lstat `path`; raises OSError when it cannot be read."""
    st = os.lstat(path)
    return FileStat(
        size=st.st_size,
        atime=Timespec.from_ns(st.st_atime_ns),
        ctime=Timespec.from_ns(st.st_ctime_ns),
        mtime=Timespec.from_ns(st.st_mtime_ns),
    )
