"""ProviderAdapter abstract base (single-class module).

Defines the per-provider translation contract between the unified message
model and a provider's wire format. Adapters are stateless: they never
perform I/O and never hold credentials beyond a single ``build_request`` call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, AsyncIterator, Optional, Union

from ..errors import ProviderError
from ..models import Conversation, Message, ProviderType, ResponseChunk, WireRequest, WireResponse
from ..models_parts.response_chunk import _EndOfStream
from ..streaming.sse import SseEvent, iter_sse_events

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ...config.settings import ProviderSettings


StreamItem = Union[ResponseChunk, None, _EndOfStream]


class ProviderAdapter(ABC):
    """Capability set every provider adapter implements.

    Implementations map roles and content to provider fields, attach the
    credential header, and classify every provider failure into a
    :class:`ProviderError`. They never let a raw payload or decoding
    exception escape.
    """

    provider: ProviderType

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"openai"``."""
        return self.provider.value

    @abstractmethod
    def build_request(
        self,
        conversation: Conversation,
        settings: "ProviderSettings",
        api_key: str,
        *,
        stream: bool = False,
    ) -> WireRequest:
        """Translate ``conversation`` into a deterministic wire request."""

    @abstractmethod
    def parse_response(self, response: WireResponse, *, model: Optional[str] = None) -> Message:
        """Translate a complete reply into an assistant message or raise."""

    @abstractmethod
    def map_error_response(self, response: WireResponse, *, model: Optional[str] = None) -> ProviderError:
        """Classify an HTTP error reply (status first, then provider error type)."""

    def iter_events(self, lines: AsyncIterator[str]) -> AsyncIterator[SseEvent]:
        """Decode raw stream framing into events. Both shipped providers use SSE."""
        return iter_sse_events(lines)

    @abstractmethod
    def parse_stream_chunk(self, event: SseEvent, *, model: Optional[str] = None) -> StreamItem:
        """Translate one stream event.

        Returns a :class:`ResponseChunk`, ``None`` for ignorable control
        frames, or ``END_OF_STREAM`` for the provider's end marker. Raises
        :class:`ProviderError` for unparseable frames and in-band errors.
        """


__all__ = ["ProviderAdapter", "StreamItem"]
