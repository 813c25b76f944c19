"""
Streaming response chunk model.

A stream is a finite, forward-only sequence of `ResponseChunk` values: zero or
more content fragments followed by exactly one terminal chunk. The terminal
chunk carries no content and either no error (clean end marker) or the
`ProviderError` that ended the stream.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors_parts.provider_error import ProviderError


@dataclass(frozen=True)
class ResponseChunk:
    """One incremental fragment of assistant content.

    Attributes:
        content: Text delta. May be empty.
        is_final: True only on the terminal chunk.
        stop_reason: Provider stop reason (e.g. ``"end_turn"``, ``"stop"``)
            when known; reported on the terminal chunk.
        error: Populated on a terminal chunk when the stream failed.
    """

    content: str
    is_final: bool = False
    stop_reason: Optional[str] = None
    error: Optional[ProviderError] = None

    @classmethod
    def end(cls, stop_reason: Optional[str] = None) -> "ResponseChunk":
        """Build the clean end-of-stream marker."""
        return cls(content="", is_final=True, stop_reason=stop_reason)

    @classmethod
    def failure(cls, error: ProviderError) -> "ResponseChunk":
        """Build a terminal chunk carrying ``error``."""
        return cls(content="", is_final=True, error=error)

    def is_error(self) -> bool:
        return self.error is not None


class _EndOfStream:
    """Sentinel returned by adapters when a frame marks the end of a stream."""

    _instance: Optional["_EndOfStream"] = None

    def __new__(cls) -> "_EndOfStream":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "END_OF_STREAM"


END_OF_STREAM = _EndOfStream()


__all__ = ["END_OF_STREAM", "ResponseChunk"]
