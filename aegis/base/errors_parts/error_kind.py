"""
Normalized provider error kinds (taxonomy).

Defines the closed `ErrorKind` enumeration every adapter maps its failures
into. Values are lowercase snake_case and are considered a stable public
contract for logging and for the CLI's user-facing messages.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated normalized failure categories.

    Only ``NETWORK``, ``RATE_LIMITED`` and ``PROVIDER_UNAVAILABLE`` are marked
    retry-eligible. The core itself never retries; the flag is metadata for
    the caller.
    """

    INVALID_REQUEST = "invalid_request"
    MISSING_CREDENTIALS = "missing_credentials"
    NETWORK = "network"
    PROTOCOL_ERROR = "protocol_error"
    RATE_LIMITED = "rate_limited"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    UNAUTHORIZED = "unauthorized"

    @property
    def retryable(self) -> bool:
        """Return True when a caller may retry the failed call."""
        return self in _RETRYABLE


_RETRYABLE = frozenset(
    {ErrorKind.NETWORK, ErrorKind.RATE_LIMITED, ErrorKind.PROVIDER_UNAVAILABLE}
)


__all__ = ["ErrorKind"]
