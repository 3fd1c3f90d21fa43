"""Shared HTTP helpers used by the remote catalog, the trust chain and the installer.

Encapsulates the request/timeout error handling so callers only ever see a
``FetchError``. Requests are single blocking round trips; nothing is retried
or cached.
"""
from __future__ import annotations

import logging
from typing import Any, Tuple

import requests

from constants import Constants
from errors import FetchError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": Constants.USER_AGENT,
    "Accept": "*/*",
}


def fetch(url: str, *, context: str, **kwargs: Any) -> Tuple[int, bytes]:
    """Perform a GET request and return ``(status_code, body)``.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "catalog", "sha256sums").
        **kwargs: Passed through to requests.get.

    Raises:
        FetchError: On timeouts and connection errors.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, headers=HEADERS, **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise FetchError(url, reason="timed out") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise FetchError(url, reason=str(exc)) from exc

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success" if res.status_code == 200 else "error",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context,
            ),
        )
    return res.status_code, res.content


def fetch_bytes(url: str, *, context: str = "download") -> bytes:
    """GET ``url`` and return the body; any non-200 status is a FetchError."""
    status, body = fetch(url, context=context)
    if status != 200:
        raise FetchError(url, status=status)
    return body


def fetch_text(url: str, *, context: str = "download") -> str:
    """Like ``fetch_bytes`` but decoded as UTF-8 (invalid bytes replaced)."""
    return fetch_bytes(url, context=context).decode("utf-8", errors="replace")
