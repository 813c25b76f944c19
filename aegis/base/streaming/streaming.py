"""Streaming helpers shared by the dispatcher and callers.

Keeps chunk accumulation separate from the stream orchestration in
``message_stream`` so callers can fold a recorded chunk list without
importing the dispatcher.
"""

from __future__ import annotations

from typing import AsyncIterable, Iterable, List, Union

from ..models import Message, ResponseChunk


def _fold(chunks: Iterable[ResponseChunk]) -> Message:
    parts: List[str] = []
    for chunk in chunks:
        if chunk.error is not None:
            raise chunk.error
        if chunk.content:
            parts.append(chunk.content)
    return Message.assistant("".join(parts))


async def accumulate_chunks(chunks: Union[Iterable[ResponseChunk], AsyncIterable[ResponseChunk]]) -> Message:
    """Concatenate streamed deltas into the equivalent non-streamed message.

    Accepts either a plain iterable of chunks (e.g. a recorded list) or an
    async iterable such as a :class:`MessageStream`.

    Raises:
        ProviderError: the error carried by the terminal chunk, if any.
    """
    if isinstance(chunks, AsyncIterable):
        collected: List[ResponseChunk] = [chunk async for chunk in chunks]
        return _fold(collected)
    return _fold(chunks)


def collect_text(chunks: Iterable[ResponseChunk]) -> str:
    """Synchronous variant returning only the concatenated text."""
    return _fold(chunks).content


__all__ = ["accumulate_chunks", "collect_text"]
