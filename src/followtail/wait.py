"""Single wait primitive shared by every suspension point of the reader.

A ``Waiter`` is created per read call. It bounds the total time spent waiting
by an optional timeout and wakes early when an optional cancellation event is
set, so plain polling and cancellable waiting are one code path.
"""
from __future__ import annotations

import threading
import time
from typing import Optional

from .errors import TailTimeout


class Waiter:
    def __init__(
        self,
        path: str,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        clock=time.monotonic,
    ) -> None:
        self.path = path
        self.cancel = cancel
        self._clock = clock
        self.deadline: Optional[float] = None if timeout is None else clock() + timeout

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return self.deadline - self._clock()

    def sleep(self, interval: float) -> None:
        """Suspend for ``interval`` seconds, or less when the deadline is closer.

        Raises ``TailTimeout`` when the deadline has already passed or the
        cancellation event fires before or during the sleep.
        """
        if self.cancel is not None and self.cancel.is_set():
            raise TailTimeout(self.path, cancelled=True)
        delay = interval
        remaining = self.remaining()
        if remaining is not None:
            if remaining <= 0:
                raise TailTimeout(self.path)
            delay = min(delay, remaining)
        if self.cancel is not None:
            if self.cancel.wait(delay):
                raise TailTimeout(self.path, cancelled=True)
        else:
            time.sleep(delay)


__all__ = ["Waiter"]
