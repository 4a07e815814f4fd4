"""Exceptions raised by the tailing reader.

End of stream is never an exception (``read`` returns ``b""``) and fatal I/O
problems surface as the original ``OSError``; the only error type owned by
this package is the timeout raised when a caller-bounded wait runs out.
"""
from __future__ import annotations


class TailTimeout(TimeoutError):
    """A read call gave up waiting because its timeout elapsed or it was cancelled.

    The reader stays usable; a later read retries the same wait.
    """

    def __init__(self, path: str, cancelled: bool = False) -> None:
        self.path = path
        self.cancelled = cancelled
        reason = "cancelled" if cancelled else "timed out"
        super().__init__(f"tail {reason}: {path}")


__all__ = ["TailTimeout"]
