"""
Structured provider error exception type.

Wraps provider-specific failures with a normalized `ErrorKind` for consistent
handling at call sites, retry decisions in outer layers, and structured
logging. The provider's raw error payload travels only in ``raw`` and is never
part of the string form.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .error_kind import ErrorKind


_USER_MESSAGES = {
    ErrorKind.INVALID_REQUEST: "The request was rejected as invalid",
    ErrorKind.MISSING_CREDENTIALS: "No API key is configured for this provider",
    ErrorKind.NETWORK: "Could not reach the provider",
    ErrorKind.PROTOCOL_ERROR: "The provider returned an unexpected response",
    ErrorKind.RATE_LIMITED: "The provider is rate limiting requests",
    ErrorKind.PROVIDER_UNAVAILABLE: "The provider is temporarily unavailable",
    ErrorKind.UNAUTHORIZED: "The provider rejected the API key",
}


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized kind.

    Attributes:
        kind: Normalized :class:`ErrorKind` classification for the failure.
        message: Human-readable error message suitable for logging. Must not
            contain credentials.
        provider: Provider key where the error originated (e.g. ``"openai"``).
        model: Optional model name associated with the failure.
        status_code: HTTP status when the failure came from a provider reply.
        retry_after: Seconds the provider asked callers to wait, when sent.
        raw: Debug-only attachment (provider payload or original exception).
    """

    kind: ErrorKind
    message: str
    provider: str = "unknown"
    model: Optional[str] = None
    status_code: Optional[int] = None
    retry_after: Optional[float] = None
    raw: Optional[Any] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.kind = ErrorKind(self.kind)
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        """Hint for outer retry logic, derived from ``kind``."""
        return self.kind.retryable

    def scrub(self, *secrets: Optional[str]) -> "ProviderError":
        """Mask every occurrence of ``secrets`` in the message; returns ``self``."""
        for secret in secrets:
            if secret and secret in self.message:
                self.message = self.message.replace(secret, "***")
        self.args = (self.message,)
        return self

    def user_message(self) -> str:
        """Return a short message for end users derived from the error kind."""
        text = _USER_MESSAGES[self.kind]
        if self.kind is ErrorKind.MISSING_CREDENTIALS:
            return f"{text} ({self.provider}); run `aegis config` to set one"
        if self.kind is ErrorKind.RATE_LIMITED and self.retry_after is not None:
            return f"{text}; retry after {self.retry_after:g}s"
        return f"{text}: {self.message}"

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, kind, and message."""
        return f"{self.provider}:{self.model or '-'} {self.kind.value}: {self.message}"


__all__ = ["ProviderError"]
