"""Transition events emitted by the reader to its sink."""
from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class EventKind(str, enum.Enum):
    OPENED = "opened"
    REOPENED = "new file found"
    TRUNCATED = "file truncated"
    MOVED = "file moved"
    EOF_TIMEOUT = "eof timed out"
    TIMEOUT = "timed out"


@dataclass(frozen=True)
class TailEvent:
    kind: EventKind
    path: str
    offset: int
    identity: Optional[tuple] = None
    timestamp: float = field(default_factory=time.time)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "event": self.kind.name.lower(),
            "message": self.kind.value,
            "path": self.path,
            "offset": self.offset,
            "identity": list(self.identity) if self.identity is not None else None,
            "timestamp": self.timestamp,
        }


__all__ = ["EventKind", "TailEvent"]
