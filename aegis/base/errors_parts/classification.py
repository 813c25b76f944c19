"""
Error classification helpers mapping statuses and exceptions to `ErrorKind`.

Implements HTTP status mapping, transport exception detection, and
``retry-after`` header parsing. Anything that cannot be classified falls back
to ``PROTOCOL_ERROR`` so no opaque failure escapes the core.
"""
from __future__ import annotations

import asyncio
from email.utils import parsedate_to_datetime
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional

import httpx

from .error_kind import ErrorKind
from .provider_error import ProviderError


_HTTP_STATUS_MAP: Dict[int, ErrorKind] = {
    400: ErrorKind.INVALID_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.UNAUTHORIZED,
    408: ErrorKind.NETWORK,
    413: ErrorKind.INVALID_REQUEST,
    422: ErrorKind.INVALID_REQUEST,
    429: ErrorKind.RATE_LIMITED,
}


def kind_for_status(status: int) -> ErrorKind:
    """Map an HTTP error status to an :class:`ErrorKind`.

    Every 5xx status (including Anthropic's 529 "overloaded") is
    ``PROVIDER_UNAVAILABLE``. Unmapped statuses default to ``PROTOCOL_ERROR``.
    """
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if 500 <= status < 600:
        return ErrorKind.PROVIDER_UNAVAILABLE
    return ErrorKind.PROTOCOL_ERROR


def classify_exception(exc: BaseException) -> ErrorKind:
    """Classify an exception into a normalized :class:`ErrorKind`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeouts and transport failures (``network``).
        3. Everything else, including decoding and schema failures,
           is ``PROTOCOL_ERROR``.
    """
    if isinstance(exc, ProviderError):
        return exc.kind
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TransportError)):
        return ErrorKind.NETWORK
    if isinstance(exc, (ConnectionError, OSError)):
        return ErrorKind.NETWORK
    return ErrorKind.PROTOCOL_ERROR


def parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[float]:
    """Return the ``retry-after`` delay in seconds, if the provider sent one.

    Accepts delta-seconds and HTTP-date forms. Header lookup is
    case-insensitive. Unparseable values yield ``None``.
    """
    if not headers:
        return None
    value = None
    for name, candidate in headers.items():
        if name.lower() == "retry-after":
            value = candidate
            break
    if value is None:
        return None
    value = str(value).strip()
    try:
        seconds = float(value)
        return seconds if seconds >= 0 else None
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


__all__ = [
    "classify_exception",
    "kind_for_status",
    "parse_retry_after",
    "_HTTP_STATUS_MAP",
]
