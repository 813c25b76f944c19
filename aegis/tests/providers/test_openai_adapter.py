"""OpenAI adapter: request shape, reply parsing, error mapping, stream frames."""

from __future__ import annotations

import json

import pytest

from aegis.base.errors import ErrorKind, ProviderError
from aegis.base.models import END_OF_STREAM, Message, WireResponse
from aegis.base.streaming import SseEvent
from aegis.config import default_settings
from aegis.openai import OpenAIAdapter

KEY = "sk-openai-adapter"


@pytest.fixture()
def adapter() -> OpenAIAdapter:
    return OpenAIAdapter()


@pytest.fixture()
def settings():
    return default_settings("openai")


def _completion(content) -> WireResponse:
    body = {
        "id": "chatcmpl-1",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
    }
    return WireResponse(status_code=200, body=json.dumps(body))


def test_build_request_shape(adapter, settings):
    conversation = [Message.system("be brief"), Message.user("hi")]
    req = adapter.build_request(conversation, settings, KEY)

    assert req.url == "https://api.openai.com/v1/chat/completions"  # nosec B101
    assert req.headers["authorization"] == f"Bearer {KEY}"  # nosec B101
    assert req.body == {  # nosec B101
        "model": settings.model,
        "messages": [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}],
        "max_tokens": 2048,
        "temperature": 0.7,
    }
    assert KEY not in repr(req)  # nosec B101


def test_build_request_stream_and_no_temperature(adapter, settings):
    req = adapter.build_request([Message.user("hi")], settings.updated(temperature=None), KEY, stream=True)
    assert req.body["stream"] is True  # nosec B101
    assert "temperature" not in req.body  # nosec B101
    assert req.stream  # nosec B101


def test_build_request_empty_conversation(adapter, settings):
    with pytest.raises(ProviderError) as exc:
        adapter.build_request([], settings, KEY)
    assert exc.value.kind is ErrorKind.INVALID_REQUEST  # nosec B101


def test_parse_response_reads_first_choice(adapter):
    assert adapter.parse_response(_completion("Hanoi")) == Message.assistant("Hanoi")  # nosec B101
    assert adapter.parse_response(_completion(None)).content == ""  # nosec B101


@pytest.mark.parametrize(
    "body",
    [
        "<html>gateway</html>",
        json.dumps({"choices": []}),
        json.dumps({"choices": [{"index": 0}]}),
        json.dumps({"choices": [{"message": {"content": 5}}]}),
    ],
)
def test_parse_response_malformed_is_protocol_error(adapter, body):
    with pytest.raises(ProviderError) as exc:
        adapter.parse_response(WireResponse(status_code=200, body=body))
    assert exc.value.kind is ErrorKind.PROTOCOL_ERROR  # nosec B101


@pytest.mark.parametrize(
    "status,code,kind",
    [
        (400, "context_length_exceeded", ErrorKind.INVALID_REQUEST),
        (401, "invalid_api_key", ErrorKind.UNAUTHORIZED),
        (429, "rate_limit_exceeded", ErrorKind.RATE_LIMITED),
        (429, "insufficient_quota", ErrorKind.RATE_LIMITED),
        (500, None, ErrorKind.PROVIDER_UNAVAILABLE),
        (503, None, ErrorKind.PROVIDER_UNAVAILABLE),
        (404, "model_not_found", ErrorKind.INVALID_REQUEST),
    ],
)
def test_error_statuses_map_to_kinds(adapter, status, code, kind):
    body = json.dumps({"error": {"message": "failed", "type": "invalid_request_error", "code": code}})
    err = adapter.map_error_response(WireResponse(status_code=status, body=body), model="gpt")
    assert err.kind is kind  # nosec B101
    assert err.provider == "openai" and err.model == "gpt"  # nosec B101
    assert err.raw["error"]["message"] == "failed"  # nosec B101


def test_non_json_error_body_keeps_status_kind(adapter):
    err = adapter.map_error_response(WireResponse(status_code=502, body="<html>Bad gateway</html>"))
    assert err.kind is ErrorKind.PROVIDER_UNAVAILABLE  # nosec B101
    assert err.message == "HTTP 502"  # nosec B101


def test_error_message_is_truncated(adapter):
    body = json.dumps({"error": {"message": "x" * 2000}})
    err = adapter.map_error_response(WireResponse(status_code=400, body=body))
    assert len(err.message) < 600  # nosec B101


def test_in_band_error_without_choices(adapter):
    body = json.dumps({"error": {"message": "quota", "code": "insufficient_quota"}})
    with pytest.raises(ProviderError) as exc:
        adapter.parse_response(WireResponse(status_code=200, body=body))
    assert exc.value.kind is ErrorKind.RATE_LIMITED  # nosec B101


def _frame(payload) -> SseEvent:
    return SseEvent(data=json.dumps(payload))


def test_stream_frames_translate(adapter):
    chunk = adapter.parse_stream_chunk(_frame({"choices": [{"delta": {"content": "Ha"}, "finish_reason": None}]}))
    assert chunk.content == "Ha" and chunk.stop_reason is None  # nosec B101

    final = adapter.parse_stream_chunk(_frame({"choices": [{"delta": {}, "finish_reason": "stop"}]}))
    assert final.content == "" and final.stop_reason == "stop"  # nosec B101

    assert adapter.parse_stream_chunk(_frame({"choices": [{"delta": {"role": "assistant"}}]})) is None  # nosec B101
    assert adapter.parse_stream_chunk(_frame({"choices": [], "usage": {"total_tokens": 3}})) is None  # nosec B101
    assert adapter.parse_stream_chunk(SseEvent(data="[DONE]")) is END_OF_STREAM  # nosec B101


def test_stream_bad_frames(adapter):
    with pytest.raises(ProviderError) as exc:
        adapter.parse_stream_chunk(SseEvent(data="{nope"))
    assert exc.value.kind is ErrorKind.PROTOCOL_ERROR  # nosec B101

    with pytest.raises(ProviderError) as exc:
        adapter.parse_stream_chunk(_frame({"error": {"message": "overloaded", "code": "server_error"}}))
    assert exc.value.kind is ErrorKind.PROVIDER_UNAVAILABLE  # nosec B101
