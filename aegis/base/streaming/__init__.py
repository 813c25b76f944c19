"""Streaming package.

Exposes SSE decoding, chunk accumulation and the cancellable
:class:`MessageStream` under a single namespace.
"""

from .sse import SseEvent, iter_sse_events
from .streaming import accumulate_chunks, collect_text
from .message_stream import MessageStream

__all__ = [
    "MessageStream",
    "SseEvent",
    "accumulate_chunks",
    "collect_text",
    "iter_sse_events",
]
