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
# snapdiff/src/snapdiff/__init__.py

"""Snapshot diff stream reader, reorderer and change event extractor."""

from .config import DiffConfig
from .diff import SnapshotDiff, get_snapshot_diff
from .errors import SnapshotDiffError
from .stream import PageSource
from .types import (
    ChangeEvent,
    DeleteEvent,
    DiffResult,
    EntryEvent,
    RenameEvent,
    SymlinkEvent,
)

__version__ = "0.1.0"

__all__ = [
    "SnapshotDiff",
    "get_snapshot_diff",
    "DiffConfig",
    "PageSource",
    "SnapshotDiffError",
    "ChangeEvent",
    "DeleteEvent",
    "DiffResult",
    "EntryEvent",
    "RenameEvent",
    "SymlinkEvent",
]
