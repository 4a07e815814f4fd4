"""Classify what happened to a tailed path since the reader last looked.

The classifier only compares stat metadata: the snapshot taken when the
handle was opened (its identity), the number of bytes delivered so far, and
the last modification time seen. Identity rather than path equality decides
"moved": a path that was unlinked and recreated between two polls is a new
file, not a truncation of the old one.
"""
from __future__ import annotations

import enum
import os
from typing import NamedTuple, Optional


class Status(enum.Enum):
    NO_CHANGE = "no-change"
    APPENDED = "appended"
    TRUNCATED = "truncated"
    MOVED = "moved"


class Classification(NamedTuple):
    status: Status
    # Modification time the caller should remember for the next poll.
    mtime_ns: int


def probe(path: str) -> Optional[os.stat_result]:
    """Stat ``path``; ``None`` when it does not exist, other errors propagate."""
    try:
        return os.stat(path)
    except FileNotFoundError:
        return None


def identity_of(st: os.stat_result) -> tuple:
    return (st.st_dev, st.st_ino)


def classify(opened, current, offset: int, last_mtime_ns: int) -> Classification:
    """Compare the opened file's snapshot against the path's current metadata.

    ``opened`` and ``current`` are stat results (``current`` is ``None`` when
    the path is gone). Exactly one status is returned.
    """
    if current is None or not os.path.samestat(opened, current):
        return Classification(Status.MOVED, last_mtime_ns)
    size = current.st_size
    mtime_ns = current.st_mtime_ns
    if size == offset:
        # Same size but rewritten since we last looked.
        if mtime_ns > last_mtime_ns:
            return Classification(Status.TRUNCATED, mtime_ns)
        return Classification(Status.NO_CHANGE, last_mtime_ns)
    if size > offset:
        return Classification(Status.APPENDED, mtime_ns)
    return Classification(Status.TRUNCATED, mtime_ns)


__all__ = ["Status", "Classification", "probe", "identity_of", "classify"]
