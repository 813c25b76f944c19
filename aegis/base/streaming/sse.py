"""Server-sent events decoding.

Turns the line iterator of a streaming HTTP body into :class:`SseEvent`
values. Fields are accumulated until a blank line dispatches the event;
``:``-prefixed comment lines are skipped. A trailing event without a
terminating blank line is still dispatched when the body ends.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator, List, Optional


@dataclass(frozen=True)
class SseEvent:
    """One decoded server-sent event.

    Attributes:
        data: Joined ``data:`` field lines (``\\n`` separated).
        event: Value of the ``event:`` field, when present.
    """

    data: str
    event: Optional[str] = None

    @property
    def is_done_marker(self) -> bool:
        """True for the OpenAI-style ``data: [DONE]`` terminator."""
        return self.data.strip() == "[DONE]"


def _split_field(line: str) -> tuple[str, str]:
    name, sep, value = line.partition(":")
    if not sep:
        return line, ""
    if value.startswith(" "):
        value = value[1:]
    return name, value


async def iter_sse_events(lines: AsyncIterator[str]) -> AsyncIterator[SseEvent]:
    """Decode an async iterator of body lines into events."""
    data: List[str] = []
    event: Optional[str] = None
    async for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            if data or event is not None:
                yield SseEvent(data="\n".join(data), event=event)
            data, event = [], None
            continue
        if line.startswith(":"):
            continue
        name, value = _split_field(line)
        if name == "data":
            data.append(value)
        elif name == "event":
            event = value
        # id / retry fields carry nothing the adapters use
    if data or event is not None:
        yield SseEvent(data="\n".join(data), event=event)


__all__ = ["SseEvent", "iter_sse_events"]
