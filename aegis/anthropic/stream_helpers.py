"""Anthropic streaming helpers.

Translate Messages API server-sent events into ``ResponseChunk`` values::

    content_block_delta (text_delta)  -> text chunk
    message_delta                     -> stop reason
    message_stop                      -> END_OF_STREAM
    error                             -> ProviderError (in-band)
    ping, message_start,
    content_block_start/stop, other   -> ignored
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from ..base.errors import ErrorKind, ProviderError
from ..base.interfaces import StreamItem
from ..base.models import END_OF_STREAM, ResponseChunk
from ..base.streaming import SseEvent
from ..base.utils.payloads import in_band_error
from .helpers import ERROR_TYPE_MAP, PROVIDER_NAME


def decode_event(event: SseEvent, *, model: Optional[str] = None) -> Optional[Mapping[str, Any]]:
    """Decode the JSON payload of one event; ``None`` for data-less frames."""
    if not event.data.strip():
        return None
    try:
        payload = json.loads(event.data)
    except ValueError as exc:
        raise ProviderError(
            kind=ErrorKind.PROTOCOL_ERROR,
            message=f"unparseable stream frame: {exc}",
            provider=PROVIDER_NAME,
            model=model,
            raw=event.data,
        ) from exc
    if not isinstance(payload, dict):
        raise ProviderError(
            kind=ErrorKind.PROTOCOL_ERROR,
            message="stream frame is not a JSON object",
            provider=PROVIDER_NAME,
            model=model,
            raw=event.data,
        )
    return payload


def translate_stream_event(event: SseEvent, *, model: Optional[str] = None) -> StreamItem:
    """Map one Anthropic event to a chunk, ``None`` or ``END_OF_STREAM``."""
    payload = decode_event(event, model=model)
    if payload is None:
        return END_OF_STREAM if event.event == "message_stop" else None
    kind = payload.get("type") or event.event
    if kind == "content_block_delta":
        delta = payload.get("delta")
        if not isinstance(delta, Mapping):
            raise ProviderError(
                kind=ErrorKind.PROTOCOL_ERROR,
                message="content_block_delta without delta",
                provider=PROVIDER_NAME,
                model=model,
                raw=payload,
            )
        if delta.get("type") == "text_delta" and isinstance(delta.get("text"), str):
            return ResponseChunk(content=delta["text"])
        return None
    if kind == "content_block_start":
        block = payload.get("content_block")
        if isinstance(block, Mapping) and block.get("type") == "text" and block.get("text"):
            return ResponseChunk(content=str(block["text"]))
        return None
    if kind == "message_delta":
        delta = payload.get("delta")
        stop_reason = delta.get("stop_reason") if isinstance(delta, Mapping) else None
        return ResponseChunk(content="", stop_reason=stop_reason) if stop_reason else None
    if kind == "message_stop":
        return END_OF_STREAM
    if kind == "error":
        raise in_band_error(payload, provider=PROVIDER_NAME, model=model, type_map=ERROR_TYPE_MAP)
    # ping, message_start, content_block_stop and event types added later
    return None


__all__ = ["decode_event", "translate_stream_event"]
