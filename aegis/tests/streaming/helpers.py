"""Frame builders shared by the streaming tests."""

from __future__ import annotations

from typing import List, Optional, Sequence

from aegis.mock import sse_lines


def anthropic_lines(pieces: Sequence[str], *, stop: Optional[str] = "end_turn", end: bool = True) -> List[str]:
    frames: List[dict] = [{"type": "message_start", "message": {"role": "assistant"}}]
    frames += [
        {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": p}} for p in pieces
    ]
    if stop is not None:
        frames.append({"type": "message_delta", "delta": {"stop_reason": stop}})
    if end:
        frames.append({"type": "message_stop"})
    return sse_lines(frames, event_names=True)


def openai_lines(pieces: Sequence[str], *, finish: str = "stop", done: bool = True) -> List[str]:
    frames: List[object] = [{"choices": [{"index": 0, "delta": {"role": "assistant"}, "finish_reason": None}]}]
    frames += [{"choices": [{"index": 0, "delta": {"content": p}, "finish_reason": None}]} for p in pieces]
    frames.append({"choices": [{"index": 0, "delta": {}, "finish_reason": finish}]})
    if done:
        frames.append("[DONE]")
    return sse_lines(frames)
