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
# snapdiff/src/snapdiff/types.py

"""Type definitions for snapshot diff records and change events."""

from dataclasses import dataclass
from typing import Any, Literal


EntityType = Literal["file", "dir", "symlink"]
EventType = Literal["delete", "rename", "file", "dir", "symlink"]


@dataclass(frozen=True)
class DiffRecord:
    """One line of the raw diff stream."""
    level: int
    object_id: str
    payload: tuple[str, ...]

    @property
    def payload_line(self) -> str:
        return "\t".join(self.payload)


@dataclass(frozen=True)
class Timespec:
    sec: int
    nsec: int

    @classmethod
    def from_ns(cls, ns: int) -> "Timespec":
        sec, nsec = divmod(ns, 1_000_000_000)
        return cls(sec=sec, nsec=nsec)

    def to_json(self) -> dict[str, int]:
        return {"nsec": self.nsec, "sec": self.sec}


@dataclass(frozen=True)
class FileStat:
    """Live filesystem metadata for one path."""
    size: int
    atime: Timespec
    ctime: Timespec
    mtime: Timespec


@dataclass(frozen=True)
class DeleteEvent:
    object_type: EntityType
    path: str
    type: EventType = "delete"

    def to_json(self) -> dict[str, Any]:
        return {"object_type": self.object_type, "path": self.path,
                "type": self.type}


@dataclass(frozen=True)
class RenameEvent:
    path_old: str
    path_new: str
    type: EventType = "rename"

    def to_json(self) -> dict[str, Any]:
        return {"path_new": self.path_new, "path_old": self.path_old,
                "type": self.type}


def _stat_fields(stat: FileStat | None) -> dict[str, Any]:
    if stat is None:
        return {}
    return {
        "atime": stat.atime.to_json(),
        "ctime": stat.ctime.to_json(),
        "mtime": stat.mtime.to_json(),
        "size": stat.size,
    }


@dataclass(frozen=True)
class EntryEvent:
    """Creation or modification of a regular file or directory."""
    type: EventType
    path: str
    created: bool
    modified: bool
    stat_changed: bool
    xattr_changed: bool
    stat: FileStat | None = None

    def to_json(self) -> dict[str, Any]:
        item = {
            "created": self.created,
            "modified": self.modified,
            "path": self.path,
            "stat": self.stat_changed,
            "type": self.type,
            "xattr": self.xattr_changed,
        }
        item.update(_stat_fields(self.stat))
        return item


@dataclass(frozen=True)
class SymlinkEvent:
    """Creation or modification of a symlink; target only when created."""
    path: str
    created: bool
    stat_changed: bool
    target: str | None = None
    stat: FileStat | None = None
    type: EventType = "symlink"

    def to_json(self) -> dict[str, Any]:
        item: dict[str, Any] = {
            "created": self.created,
            "path": self.path,
            "stat": self.stat_changed,
            "type": self.type,
        }
        if self.target is not None:
            item["target"] = self.target
        item.update(_stat_fields(self.stat))
        return item


ChangeEvent = DeleteEvent | RenameEvent | EntryEvent | SymlinkEvent


@dataclass(frozen=True)
class DiffResult:
    """What one completed run left in its result directory."""
    result_dir: str
    page_count: int
    bucket_count: int
    json_count: int
