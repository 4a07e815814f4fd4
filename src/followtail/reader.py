"""Follow-mode reader: a byte stream over a path that survives truncation,
moves and rotation.

``TailReader`` is an ``io.RawIOBase``: ``read``/``readinto`` return new bytes
as the file grows and block (polling stat metadata) while there are none.
The read loop has two regimes:

* attached: the path still names the file we hold open. On end of file we
  poll the path until it grows (resume reading), shrinks or is rewritten
  (seek back to 0), or stops naming our file (switch to missing).
* missing: the file was moved or deleted. We keep draining the old handle
  and try to open the path again every poll; once the path has been absent
  for ``eof_wait`` seconds the stream ends (``read`` returns ``b""``).

Every wait is bounded by the optional per-call ``timeout`` and ``cancel``
event, which raise ``TailTimeout`` and leave the reader reusable.

Rotation ordering: bytes still readable from the old handle are delivered
before the path is reopened, but once the new file is open the old handle is
closed, so anything written to the old file after that point is not read.
"""
from __future__ import annotations

import io
import os
import threading
import time
from typing import Optional

from .config import TailConfig
from .errors import TailTimeout
from .events import EventKind, TailEvent
from .sinks import EventSink, LoggingSink
from .status import Status, classify, identity_of, probe
from .wait import Waiter


class TailReader(io.RawIOBase):
    def __init__(
        self,
        path: str,
        config: Optional[TailConfig] = None,
        *,
        cancel: Optional[threading.Event] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        super().__init__()
        self._fh = None
        self._stat: Optional[os.stat_result] = None
        self.path = os.fspath(path)
        self.config = config or TailConfig()
        self.cancel = cancel
        self.sink: EventSink = sink if sink is not None else LoggingSink()
        self._offset = 0
        self._last_mtime_ns = 0
        self._missing_since: Optional[float] = None
        # Counters for introspection (see metrics.reader_metrics)
        self.bytes_read = 0
        self.truncations = 0
        self.rotations = 0
        self.reopens = 0

        self._open()
        if self.config.from_end:
            self._offset = self._fh.seek(0, os.SEEK_END)
        self._emit(EventKind.OPENED)

    def __repr__(self) -> str:
        state = "closed" if self.closed else ("missing" if self.missing else "attached")
        return f"<TailReader path={self.path!r} offset={self._offset} {state}>"

    # -- file handle state -------------------------------------------------

    def _open(self) -> None:
        fh = open(self.path, "rb", buffering=0)
        try:
            st = os.fstat(fh.fileno())
        except OSError:
            fh.close()
            raise
        old = self._fh
        self._fh, self._stat = fh, st
        self._offset = 0
        self._missing_since = None
        self._last_mtime_ns = st.st_mtime_ns
        if old is not None:
            old.close()

    def _emit(self, kind: EventKind) -> None:
        identity = identity_of(self._stat) if self._stat is not None else None
        self.sink.emit(TailEvent(kind, self.path, self._offset, identity))

    # -- introspection -----------------------------------------------------

    @property
    def name(self) -> str:
        return self.path

    @property
    def offset(self) -> int:
        """Bytes delivered from the current file since it was opened (or truncated)."""
        return self._offset

    @property
    def stat(self) -> Optional[os.stat_result]:
        """Metadata snapshot taken when the current file was opened."""
        return self._stat

    @property
    def identity(self) -> Optional[tuple]:
        return identity_of(self._stat) if self._stat is not None else None

    @property
    def missing(self) -> bool:
        return self._missing_since is not None

    @property
    def missing_since(self) -> Optional[float]:
        return self._missing_since

    # -- stream interface --------------------------------------------------

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def fileno(self) -> int:
        return self._fh.fileno()

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file")
        if len(b) == 0:
            return 0
        waiter = Waiter(self.path, self.config.timeout, self.cancel)
        try:
            return self._read_loop(b, waiter)
        except TailTimeout:
            self._emit(EventKind.TIMEOUT)
            raise

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file")
        pos = self._fh.seek(offset, whence)
        self._offset = pos
        return pos

    def tell(self) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed file")
        return self._fh.tell()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
        super().close()

    # -- read loop ---------------------------------------------------------

    def _read_loop(self, b, waiter: Waiter) -> int:
        while True:
            n = self._fh.readinto(b)
            if n:
                self._offset += n
                self.bytes_read += n
                if self._missing_since is not None:
                    # Still draining the old file; the wait budget restarts.
                    self._missing_since = time.monotonic()
                else:
                    self._refresh_baseline()
                return n

            if self._missing_since is None:
                self._wait_for_change(waiter)
                continue

            try:
                self._open()
            except FileNotFoundError:
                if time.monotonic() - self._missing_since >= self.config.eof_wait:
                    self._emit(EventKind.EOF_TIMEOUT)
                    return 0
                waiter.sleep(self.config.poll)
                continue
            self.reopens += 1
            self._emit(EventKind.REOPENED)

    def _refresh_baseline(self) -> None:
        # When the handle ends where we stopped reading, its mtime covers every
        # byte delivered so far.
        st = os.fstat(self._fh.fileno())
        if st.st_size == self._offset and st.st_mtime_ns > self._last_mtime_ns:
            self._last_mtime_ns = st.st_mtime_ns

    def _wait_for_change(self, waiter: Waiter) -> None:
        while True:
            waiter.sleep(self.config.poll)
            status, self._last_mtime_ns = classify(
                self._stat, probe(self.path), self._offset, self._last_mtime_ns
            )
            if status is Status.NO_CHANGE:
                continue
            if status is Status.TRUNCATED:
                self._fh.seek(0)
                self._offset = 0
                self.truncations += 1
                self._emit(EventKind.TRUNCATED)
            elif status is Status.MOVED:
                self._missing_since = time.monotonic()
                self.rotations += 1
                self._emit(EventKind.MOVED)
            return


def open_tail(
    path: str,
    poll: float = TailConfig.poll,
    eof_wait: float = TailConfig.eof_wait,
    timeout: Optional[float] = None,
    from_end: bool = False,
    cancel: Optional[threading.Event] = None,
    sink: Optional[EventSink] = None,
) -> TailReader:
    """Open ``path`` for tailing; raises ``FileNotFoundError``/``OSError`` if it cannot be opened."""
    cfg = TailConfig(poll=poll, eof_wait=eof_wait, timeout=timeout, from_end=from_end)
    return TailReader(path, cfg, cancel=cancel, sink=sink)


__all__ = ["TailReader", "open_tail"]
