"""Optional FastAPI service exposing a running reader's status over HTTP.

Install with `pip install followtail[server]` to enable.
This keeps the core library dependency-light.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI
    from pydantic import BaseModel
except Exception as exc:  # noqa: BLE001
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install followtail[server]` to use the service."  # noqa: E501
    ) from exc

from . import __version__
from .metrics import reader_metrics, reader_state
from .reader import TailReader
from .sinks import RecentEventsSink


class StatusResponse(BaseModel):
    path: str
    state: str
    offset: int
    bytes_read: int
    truncations: int
    rotations: int
    reopens: int
    identity: Optional[List[int]] = None


class EventResponse(BaseModel):
    event: str
    message: str
    path: str
    offset: int
    identity: Optional[List[int]] = None
    timestamp: float


def build_app(reader: TailReader, events: Optional[RecentEventsSink] = None) -> FastAPI:
    # The reader is driven by another thread; handlers only read its attributes.
    app = FastAPI(title="followtail status", version=__version__)

    @app.get("/healthz")
    def health() -> Dict[str, str]:  # pragma: no cover - trivial
        return {"status": "ok"}

    @app.get("/status", response_model=StatusResponse)
    def status() -> StatusResponse:
        return StatusResponse(
            path=reader.path,
            state=reader_state(reader),
            offset=reader.offset,
            bytes_read=reader.bytes_read,
            truncations=reader.truncations,
            rotations=reader.rotations,
            reopens=reader.reopens,
            identity=list(reader.identity) if reader.identity is not None else None,
        )

    @app.get("/events", response_model=List[EventResponse])
    def recent_events() -> List[EventResponse]:
        if events is None:
            return []
        return [EventResponse(**e.as_dict()) for e in events.snapshot()]

    @app.get("/metrics")
    def metrics() -> Dict[str, Any]:
        return reader_metrics(reader)

    return app


__all__ = ["build_app"]
