"""Centralized logging helpers.

``configure_logging`` installs the single root handler used by the CLI.
The remaining helpers keep DEBUG traces structured and cheap: callers guard
them with ``is_debug_enabled`` and attach fields via ``extra_context``.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants


def configure_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure the root logger from an explicit level or TFENV_LOG_LEVEL.

    Args:
        level: Level name; falls back to the environment, then INFO.
        logfile: Optional path that receives log records instead of stderr.
    """
    name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or Constants.DEFAULT_LOG_LEVEL).upper()
    value = getattr(logging, name, None)
    if not isinstance(value, int):
        value = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if logfile:
        handler: logging.Handler = logging.FileHandler(logfile, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping, dropping fields whose value is None."""
    return {key: value for key, value in fields.items() if value is not None}


def safe_url(url: str) -> str:
    """Strip credentials and query strings from a URL before logging it."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<unparseable url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
