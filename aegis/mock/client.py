"""Scripted HTTP executor for offline testing.

Purpose
-------
Stand in for :class:`HttpxExecutor` so the dispatcher, adapters, logging and
CLI can be exercised without network traffic. Each call consumes the next
scripted reply (a :class:`WireResponse`, a :class:`MockStream` or an
exception to raise). When the script is empty the executor answers with a
provider-shaped echo of the last user message, which is what the CLI uses
under ``AEGIS_USE_MOCKS=1``.

Every request is recorded in ``requests``; every opened stream is recorded in
``streams`` and notes whether (and how early) it was closed.
"""

from __future__ import annotations

import asyncio
import json
from collections import deque
from typing import Any, AsyncIterator, Deque, Dict, Iterable, List, Mapping, Optional, Union

from ..base.logging import get_logger
from ..base.models import WireRequest, WireResponse

_logger = get_logger("aegis.mock")

Scripted = Union[WireResponse, "MockStream", BaseException]


class MockStream:
    """In-memory ``WireStream`` yielding pre-framed body lines."""

    def __init__(
        self,
        lines: Iterable[str],
        *,
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        body: str = "",
        fail_after: Optional[int] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self._lines: List[str] = list(lines)
        self._status_code = status_code
        self._headers = dict(headers or {"content-type": "text/event-stream"})
        self._body = body
        self._fail_after = fail_after
        self._error = error
        self.closed = False
        self.close_calls = 0
        self.lines_read = 0

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    async def aread(self) -> str:
        return self._body

    async def aiter_lines(self) -> AsyncIterator[str]:
        for index, line in enumerate(self._lines):
            if self.closed:
                return
            if self._fail_after is not None and index >= self._fail_after:
                raise self._error or ConnectionResetError("mock stream dropped")
            # suspend like a real socket read
            await asyncio.sleep(0)
            self.lines_read += 1
            yield line

    async def aclose(self) -> None:
        self.close_calls += 1
        self.closed = True


def sse_lines(payloads: Iterable[Union[str, Mapping[str, Any]]], *, event_names: bool = False) -> List[str]:
    """Frame ``payloads`` as server-sent event lines.

    Mapping payloads are JSON-encoded; with ``event_names`` their ``type``
    is also emitted as an ``event:`` line (Anthropic style).
    """
    lines: List[str] = []
    for payload in payloads:
        if isinstance(payload, Mapping):
            if event_names and "type" in payload:
                lines.append(f"event: {payload['type']}")
            lines.append(f"data: {json.dumps(payload)}")
        else:
            lines.append(f"data: {payload}")
        lines.append("")
    return lines


def _last_user_text(request: WireRequest) -> str:
    messages = request.body.get("messages") or []
    for message in reversed(messages):
        if message.get("role") == "user":
            return str(message.get("content", ""))
    return ""


def _is_anthropic(request: WireRequest) -> bool:
    return request.url.endswith("/v1/messages")


def echo_response(request: WireRequest) -> WireResponse:
    """Provider-shaped reply echoing the last user message."""
    text = f"[mock] {_last_user_text(request)}"
    if _is_anthropic(request):
        body: Dict[str, Any] = {
            "type": "message",
            "role": "assistant",
            "content": [{"type": "text", "text": text}],
            "stop_reason": "end_turn",
        }
    else:
        body = {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}, "finish_reason": "stop"}]}
    return WireResponse(status_code=200, body=json.dumps(body), headers={"content-type": "application/json"})


def echo_stream(request: WireRequest) -> MockStream:
    """Provider-shaped stream echoing the last user message word by word."""
    words = f"[mock] {_last_user_text(request)}".split(" ")
    pieces = [w if i == 0 else f" {w}" for i, w in enumerate(words)]
    if _is_anthropic(request):
        frames: List[Any] = [{"type": "message_start", "message": {"role": "assistant"}}]
        frames += [{"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": p}} for p in pieces]
        frames += [{"type": "message_delta", "delta": {"stop_reason": "end_turn"}}, {"type": "message_stop"}]
        return MockStream(sse_lines(frames, event_names=True))
    frames = [{"choices": [{"index": 0, "delta": {"content": p}, "finish_reason": None}]} for p in pieces]
    frames += [{"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]}, "[DONE]"]
    return MockStream(sse_lines(frames))


class MockExecutor:
    """:class:`HttpExecutor` replaying a script of replies."""

    def __init__(self, script: Optional[Iterable[Scripted]] = None, *, echo: bool = True) -> None:
        self._script: Deque[Scripted] = deque(script or ())
        self._echo = echo
        self.requests: List[WireRequest] = []
        self.streams: List[MockStream] = []
        self.closed = False

    # Scripting -----------------------------------------------------------
    def queue(self, item: Scripted) -> "MockExecutor":
        self._script.append(item)
        return self

    def queue_json(self, payload: Any, *, status_code: int = 200, headers: Optional[Mapping[str, str]] = None) -> "MockExecutor":
        return self.queue(WireResponse(status_code=status_code, body=json.dumps(payload), headers=dict(headers or {})))

    def queue_stream(self, lines: Iterable[str], **kwargs: Any) -> "MockExecutor":
        return self.queue(MockStream(lines, **kwargs))

    @property
    def calls(self) -> int:
        return len(self.requests)

    # HttpExecutor --------------------------------------------------------
    def _next(self, request: WireRequest) -> Scripted:
        self.requests.append(request)
        _logger.debug("mock.request %s headers=%s", request.url, request.redacted_headers())
        if self._script:
            return self._script.popleft()
        if not self._echo:
            raise AssertionError(f"unexpected request to {request.url}")
        return echo_stream(request) if request.stream else echo_response(request)

    async def execute(self, request: WireRequest) -> WireResponse:
        item = self._next(request)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, MockStream):
            raise TypeError("scripted a stream for a non-streaming request")
        return item

    async def open_stream(self, request: WireRequest) -> MockStream:
        item = self._next(request)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, WireResponse):
            item = MockStream(item.body.splitlines(), status_code=item.status_code, headers=item.headers, body=item.body)
        self.streams.append(item)
        return item

    async def aclose(self) -> None:
        self.closed = True


__all__ = ["MockExecutor", "MockStream", "echo_response", "echo_stream", "sse_lines"]
