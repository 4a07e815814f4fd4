"""Metrics helper for TailReader.

Provides a lightweight, dependency-free snapshot of reader state and counters
suitable for exposure via HTTP or logging. Never mutates the reader.
"""
from __future__ import annotations

import time
from typing import Any, Dict

from .reader import TailReader


def reader_state(reader: TailReader) -> str:
    if reader.closed:
        return "closed"
    return "missing" if reader.missing else "attached"


def reader_metrics(reader: TailReader) -> Dict[str, Any]:
    st = reader.stat
    since = reader.missing_since
    return {
        "path": reader.path,
        "state": reader_state(reader),
        "offset": reader.offset,
        "missing_for": (time.monotonic() - since) if since is not None else None,
        "identity": list(reader.identity) if reader.identity is not None else None,
        "size": st.st_size if st is not None else None,
        "mtime": st.st_mtime if st is not None else None,
        "bytes_read": reader.bytes_read,
        "truncations": reader.truncations,
        "rotations": reader.rotations,
        "reopens": reader.reopens,
        "config": {
            "poll": reader.config.poll,
            "eof_wait": reader.config.eof_wait,
            "timeout": reader.config.timeout,
            "from_end": reader.config.from_end,
        },
    }

__all__ = ["reader_state", "reader_metrics"]
