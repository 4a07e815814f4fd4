"""Package metadata and public API for followtail.

Expose a single source of truth for the version. Prefer reading from
importlib.metadata so that an editable install or wheel always reports
the version declared in pyproject.toml. Fallback to a hardcoded string
to avoid import errors when metadata is unavailable (e.g. direct source
usage without installation).
"""

from __future__ import annotations

from importlib import metadata as _metadata

_FALLBACK_VERSION = "0.3.0"  # MUST match pyproject.toml [project].version

try:  # pragma: no cover - success path covered indirectly via CLI test
	__version__ = _metadata.version("followtail")  # type: ignore[assignment]
except Exception:  # pragma: no cover - fallback exercised if metadata missing
	__version__ = _FALLBACK_VERSION

from .config import TailConfig  # noqa: E402
from .errors import TailTimeout  # noqa: E402
from .events import EventKind, TailEvent  # noqa: E402
from .reader import TailReader, open_tail  # noqa: E402
from .status import Status  # noqa: E402
from .tail import tail  # noqa: E402

__all__ = [
	"__version__",
	"EventKind",
	"Status",
	"TailConfig",
	"TailEvent",
	"TailReader",
	"TailTimeout",
	"open_tail",
	"tail",
]
