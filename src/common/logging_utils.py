"""Centralized logging configuration and structured-context helpers.

All modules obtain their logger with ``logging.getLogger(__name__)`` and rely
on :func:`configure_logging` having been called once by the entry point.
Structured DEBUG traces pass their fields through ``extra=extra_context(...)``.
"""
from __future__ import annotations

import logging
import os
import sys
import time
import urllib.parse
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_MARK = "_pkgversions_handler"

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        level: Level name; falls back to the PKGVERSIONS_LOG_LEVEL env var, then INFO.
        log_file: Optional path for an additional timestamped file handler.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    # Reconfiguring replaces only handlers installed here
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    setattr(console, _HANDLER_MARK, True)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        setattr(file_handler, _HANDLER_MARK, True)
        root.addHandler(file_handler)

    root.setLevel(level_value)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    ``None`` values are dropped. Keys that would shadow reserved LogRecord
    attributes (e.g. ``name``, ``module``) are prefixed with ``ctx_``.
    """
    ctx: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key in _RESERVED_ATTRS:
            key = f"ctx_{key}"
        ctx[key] = value
    return ctx


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def safe_url(url: str) -> str:
    """Strip credentials, query string and fragment from a URL for logging."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urllib.parse.urlunsplit((parts.scheme, host, parts.path, "", ""))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still inside the block."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
