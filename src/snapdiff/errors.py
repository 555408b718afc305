# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/errors.py

"""Exceptions raised by the snapshot diff pipeline."""


class SnapshotDiffError(Exception):
    """Base class for every fatal pipeline error."""


class ResultDirError(SnapshotDiffError):
    """Result directory is missing, not a directory, or not empty."""


class SnapshotDirError(SnapshotDiffError):
    """Snapshot stream root is not a directory."""


class OutputError(SnapshotDiffError):
    """A result subdirectory or output file could not be created."""


class PageUnavailableError(SnapshotDiffError):
    """A diff page could not be opened."""


class StreamReadError(SnapshotDiffError):
    """Reading a diff page kept failing after reopening it."""


class MalformedStreamError(SnapshotDiffError):
    """Stream content or a local copy of it could not be parsed."""
