import io
import threading
from typing import Iterator, Optional

from .config import TailConfig
from .errors import TailTimeout
from .reader import TailReader
from .sinks import EventSink
from .wait import Waiter


def tail(
    path: str,
    from_end: bool = True,
    sleep_s: float = 0.25,
    eof_wait: float = 10.0,
    stop_event: Optional[threading.Event] = None,
    encoding: str = "utf-8",
    sink: Optional[EventSink] = None,
) -> Iterator[str]:
    """Yield decoded lines as they are appended to ``path`` (like `tail -F`).

    Behavior:
    - Waits for the file to appear, then starts at its end (``from_end``) or start.
    - Truncation rewinds to the beginning; rotation/move switches to the new file
      and yields it from its first line, after draining the old one.
    - Stops when ``stop_event`` is set or the file stays gone for ``eof_wait`` seconds.
    """
    cfg = TailConfig(poll=sleep_s, eof_wait=eof_wait, from_end=from_end)
    waiter = Waiter(path, cancel=stop_event)
    while True:
        try:
            reader = TailReader(path, cfg, cancel=stop_event, sink=sink)
            break
        except FileNotFoundError:
            try:
                waiter.sleep(sleep_s)
            except TailTimeout:
                return

    with io.TextIOWrapper(io.BufferedReader(reader), encoding=encoding, errors="replace") as handle:
        while True:
            try:
                line = handle.readline()
            except TailTimeout:
                # stop_event fired while waiting for data
                return
            if not line:
                return
            yield line


__all__ = ["tail"]
