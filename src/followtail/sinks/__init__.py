"""Event sink abstractions.

The reader never prints; every transition (new file found, truncation, move,
timeouts) is handed to an ``EventSink``. The default sink logs, the CLI adds a
console sink, and the status service keeps the most recent events in memory.
"""
from __future__ import annotations

import json
import logging
import threading
from collections import deque
from typing import Deque, List, Optional, Protocol

from ..events import TailEvent
from ..logutil import get_logger


class EventSink(Protocol):  # pragma: no cover - simple protocol
    def emit(self, event: TailEvent) -> None: ...  # noqa: D401,E701 - protocol stub
    def close(self) -> None: ...


class LoggingSink:
    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.logger = logger or get_logger()
        self.level = level

    def emit(self, event: TailEvent) -> None:
        self.logger.log(self.level, "%s: %s (offset=%d)", event.kind.value, event.path, event.offset)

    def close(self) -> None:  # pragma: no cover - nothing to release
        pass


class JsonlSink:
    def __init__(self, path: str) -> None:
        self.path = path
        self._fh = open(path, "a", encoding="utf-8")

    def emit(self, event: TailEvent) -> None:
        self._fh.write(json.dumps(event.as_dict()) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()


class RecentEventsSink:
    """Bounded in-memory history, safe to read from another thread."""

    def __init__(self, maxlen: int = 100) -> None:
        self._events: Deque[TailEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def emit(self, event: TailEvent) -> None:
        with self._lock:
            self._events.append(event)

    def snapshot(self) -> List[TailEvent]:
        with self._lock:
            return list(self._events)

    def close(self) -> None:  # pragma: no cover - nothing to release
        pass


class MultiSink:
    def __init__(self, sinks: List[EventSink]):
        self._sinks = sinks

    def emit(self, event: TailEvent) -> None:
        for s in self._sinks:
            try:
                s.emit(event)
            except Exception:  # noqa: BLE001
                # A failing sink must not interrupt the read loop or the others.
                get_logger().exception("event sink %r failed", s)

    def close(self) -> None:
        for s in self._sinks:
            try:
                s.close()
            except Exception:  # noqa: BLE001
                get_logger().exception("closing event sink %r failed", s)


__all__ = ["EventSink", "LoggingSink", "JsonlSink", "RecentEventsSink", "MultiSink"]
