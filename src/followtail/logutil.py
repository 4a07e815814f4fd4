"""Project-wide logging utilities.

Provides a single logger configured lazily; applications embedding followtail
can override handlers or levels as needed. We default to WARNING so the reader
stays quiet unless the application asks for transition diagnostics.
"""
from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger("followtail")
        # Only add a handler if the application hasn't configured logging.
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("[%(name)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        _LOGGER = logger
    return _LOGGER


def set_verbosity(level: int) -> None:
    get_logger().setLevel(level)

__all__ = ["get_logger", "set_verbosity"]
