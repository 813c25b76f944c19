"""
Wire-level request/response DTOs exchanged with the HTTP executor.

Adapters produce a `WireRequest` from a conversation and consume a
`WireResponse`; the executor moves bytes between the two and knows nothing
about providers.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

_SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "api-key", "proxy-authorization"})


@dataclass(frozen=True)
class WireRequest:
    """Provider-specific serialized request.

    Attributes:
        method: HTTP method, ``"POST"`` for both shipped providers.
        url: Absolute endpoint URL.
        headers: Request headers including the credential header.
        body: JSON-serializable request body.
        stream: Whether the provider was asked to stream the reply.
    """

    method: str
    url: str
    headers: Mapping[str, str]
    body: Mapping[str, Any]
    stream: bool = False

    def json_body(self) -> bytes:
        """Serialize ``body`` deterministically (stable key order)."""
        return json.dumps(self.body, ensure_ascii=False, sort_keys=True).encode("utf-8")

    def redacted_headers(self) -> Dict[str, str]:
        """Return headers with credential values masked, safe for logging."""
        return {
            k: ("***" if k.lower() in _SENSITIVE_HEADERS else v)
            for k, v in self.headers.items()
        }

    def __repr__(self) -> str:
        return (
            f"WireRequest(method={self.method!r}, url={self.url!r}, "
            f"headers={self.redacted_headers()!r}, stream={self.stream!r})"
        )


@dataclass(frozen=True)
class WireResponse:
    """Raw provider reply: status, undecoded text body and headers."""

    status_code: int
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


__all__ = ["WireRequest", "WireResponse"]
