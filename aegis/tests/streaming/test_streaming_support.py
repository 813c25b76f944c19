"""Chunk accumulation helpers and the scripted mock transport."""

from __future__ import annotations

import pytest

from aegis.base.errors import ErrorKind, ProviderError
from aegis.base.models import Message, ResponseChunk, WireRequest
from aegis.base.streaming import accumulate_chunks, collect_text
from aegis.mock import MockExecutor, MockStream, echo_response


async def test_accumulate_plain_list():
    chunks = [ResponseChunk("Ha"), ResponseChunk(""), ResponseChunk("noi"), ResponseChunk.end("stop")]
    assert await accumulate_chunks(chunks) == Message.assistant("Hanoi")  # nosec B101
    assert collect_text(chunks) == "Hanoi"  # nosec B101


async def test_accumulate_raises_terminal_error():
    err = ProviderError(kind=ErrorKind.NETWORK, message="dropped")
    with pytest.raises(ProviderError) as exc:
        await accumulate_chunks([ResponseChunk("Ha"), ResponseChunk.failure(err)])
    assert exc.value is err  # nosec B101


async def test_mock_stream_close_stops_iteration():
    stream = MockStream(["a", "b", "c"])
    seen = []
    async for line in stream.aiter_lines():
        seen.append(line)
        await stream.aclose()
    assert seen == ["a"] and stream.closed and stream.lines_read == 1  # nosec B101


async def test_mock_executor_refuses_unscripted_and_mismatched_calls():
    request = WireRequest(method="POST", url="https://api.openai.com/v1/chat/completions", headers={}, body={})
    with pytest.raises(AssertionError):
        await MockExecutor(echo=False).execute(request)
    with pytest.raises(TypeError):
        await MockExecutor([MockStream([])]).execute(request)


def test_echo_response_shape_per_provider():
    body = {"messages": [{"role": "user", "content": "ping"}]}
    anthropic = echo_response(WireRequest("POST", "https://api.anthropic.com/v1/messages", {}, body))
    openai = echo_response(WireRequest("POST", "https://api.openai.com/v1/chat/completions", {}, body))
    assert '"content": [{"type": "text", "text": "[mock] ping"}]' in anthropic.body  # nosec B101
    assert '"choices"' in openai.body and "[mock] ping" in openai.body  # nosec B101
