"""Timeout configuration for the HTTP executor.

Timeouts belong to the transport: the dispatcher never enforces its own
deadline, and an elapsed timeout surfaces as an ``httpx.TimeoutException``
that the core classifies as ``network``.

Environment overrides (all optional, seconds, must be positive):
    AEGIS_TIMEOUT_CONNECT_SECONDS
    AEGIS_TIMEOUT_HTTP_SECONDS
    AEGIS_TIMEOUT_STREAM_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

import httpx

CONNECT_ENV = "AEGIS_TIMEOUT_CONNECT_SECONDS"
HTTP_ENV = "AEGIS_TIMEOUT_HTTP_SECONDS"
STREAM_ENV = "AEGIS_TIMEOUT_STREAM_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        http_timeout_seconds: Whole-body read for non-streaming requests.
        stream_timeout_seconds: Idle gap allowed between two stream lines.
    """

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 120.0
    stream_timeout_seconds: float = 60.0

    def for_request(self, stream: bool) -> httpx.Timeout:
        """Build the ``httpx.Timeout`` used for one request."""
        read = self.stream_timeout_seconds if stream else self.http_timeout_seconds
        return httpx.Timeout(read, connect=self.connect_timeout_seconds)


_CACHED: Optional[TimeoutConfig] = None
_CACHE_KEY: Optional[Tuple[str, str, str]] = None


def _parse_env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached config, re-reading if the env changed."""
    global _CACHED, _CACHE_KEY  # noqa: PLW0603 - module cache
    key = (os.getenv(CONNECT_ENV, ""), os.getenv(HTTP_ENV, ""), os.getenv(STREAM_ENV, ""))
    if _CACHED is not None and _CACHE_KEY == key:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(CONNECT_ENV, defaults.connect_timeout_seconds),
        http_timeout_seconds=_parse_env_float(HTTP_ENV, defaults.http_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(STREAM_ENV, defaults.stream_timeout_seconds),
    )
    _CACHE_KEY = key
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
