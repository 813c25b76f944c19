"""OpenAI streaming helpers.

Chat-completions streams are ``data: {...}`` frames carrying
``choices[0].delta.content`` and, on the last content frame,
``finish_reason``; ``data: [DONE]`` ends the stream. Frames without choices
(usage reports) are ignored.
"""

from __future__ import annotations

import json
from typing import Mapping, Optional

from ..base.errors import ErrorKind, ProviderError
from ..base.interfaces import StreamItem
from ..base.models import END_OF_STREAM, ResponseChunk
from ..base.streaming import SseEvent
from ..base.utils.payloads import in_band_error
from .openai_chat import ERROR_TYPE_MAP, PROVIDER_NAME


def _frame_error(message: str, raw: object, model: Optional[str]) -> ProviderError:
    return ProviderError(
        kind=ErrorKind.PROTOCOL_ERROR,
        message=message,
        provider=PROVIDER_NAME,
        model=model,
        raw=raw,
    )


def translate_stream_event(event: SseEvent, *, model: Optional[str] = None) -> StreamItem:
    """Map one chat-completions frame to a chunk, ``None`` or ``END_OF_STREAM``."""
    if event.is_done_marker:
        return END_OF_STREAM
    if not event.data.strip():
        return None
    try:
        payload = json.loads(event.data)
    except ValueError as exc:
        raise _frame_error(f"unparseable stream frame: {exc}", event.data, model) from exc
    if not isinstance(payload, dict):
        raise _frame_error("stream frame is not a JSON object", event.data, model)
    if "error" in payload:
        raise in_band_error(payload, provider=PROVIDER_NAME, model=model, type_map=ERROR_TYPE_MAP)
    choices = payload.get("choices")
    if not choices:
        return None
    if not isinstance(choices, list) or not isinstance(choices[0], Mapping):
        raise _frame_error("malformed choices in stream frame", payload, model)
    choice = choices[0]
    delta = choice.get("delta") or {}
    if not isinstance(delta, Mapping):
        raise _frame_error("malformed delta in stream frame", payload, model)
    content = delta.get("content")
    if content is not None and not isinstance(content, str):
        raise _frame_error("delta content is not a string", payload, model)
    finish_reason = choice.get("finish_reason")
    if not content and not finish_reason:
        return None
    return ResponseChunk(content=content or "", stop_reason=finish_reason)


__all__ = ["translate_stream_event"]
