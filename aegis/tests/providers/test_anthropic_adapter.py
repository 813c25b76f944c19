"""Anthropic adapter: request shape, reply parsing, error mapping, stream frames."""

from __future__ import annotations

import json

import pytest

from aegis.anthropic import AnthropicAdapter
from aegis.base.errors import ErrorKind, ProviderError
from aegis.base.models import END_OF_STREAM, Message, WireResponse
from aegis.base.streaming import SseEvent
from aegis.config import default_settings

KEY = "sk-ant-adapter"


@pytest.fixture()
def adapter() -> AnthropicAdapter:
    return AnthropicAdapter()


@pytest.fixture()
def settings():
    return default_settings("anthropic")


def _ok(payload) -> WireResponse:
    return WireResponse(status_code=200, body=json.dumps(payload))


def test_build_request_shape(adapter, settings):
    conversation = [Message.system("be brief"), Message.user("hi"), Message.assistant("hello"), Message.user("bye")]
    req = adapter.build_request(conversation, settings, KEY)

    assert req.method == "POST"  # nosec B101
    assert req.url == "https://api.anthropic.com/v1/messages"  # nosec B101
    assert req.headers["x-api-key"] == KEY  # nosec B101
    assert req.headers["anthropic-version"] == "2023-06-01"  # nosec B101
    assert req.headers["content-type"] == "application/json"  # nosec B101
    assert req.body["model"] == settings.model  # nosec B101
    assert req.body["max_tokens"] == 4096  # nosec B101
    assert req.body["system"] == "be brief"  # nosec B101
    assert [m["role"] for m in req.body["messages"]] == ["user", "assistant", "user"]  # nosec B101
    assert "stream" not in req.body  # nosec B101
    assert not req.stream  # nosec B101


def test_build_request_joins_system_messages_and_streams(adapter, settings):
    conversation = [Message.system("a"), Message.user("q"), Message.system("b")]
    req = adapter.build_request(conversation, settings, KEY, stream=True)
    assert req.body["system"] == "a\n\nb"  # nosec B101
    assert req.body["stream"] is True  # nosec B101
    assert req.headers["accept"] == "text/event-stream"  # nosec B101
    assert req.stream  # nosec B101


def test_build_request_uses_settings_overrides(adapter, settings):
    custom = settings.updated(base_url="https://proxy.local/", temperature=0.3, headers={"x-team": "qa"})
    req = adapter.build_request([Message.user("q")], custom, KEY)
    assert req.url == "https://proxy.local/v1/messages"  # nosec B101
    assert req.body["temperature"] == 0.3  # nosec B101
    assert req.headers["x-team"] == "qa"  # nosec B101


def test_build_request_rejects_empty_and_system_only(adapter, settings):
    with pytest.raises(ProviderError) as exc:
        adapter.build_request([], settings, KEY)
    assert exc.value.kind is ErrorKind.INVALID_REQUEST  # nosec B101
    with pytest.raises(ProviderError) as exc:
        adapter.build_request([Message.system("only")], settings, KEY)
    assert exc.value.kind is ErrorKind.INVALID_REQUEST  # nosec B101


def test_parse_response_concatenates_text_blocks(adapter):
    reply = adapter.parse_response(
        _ok(
            {
                "type": "message",
                "content": [
                    {"type": "text", "text": "Han"},
                    {"type": "tool_use", "id": "t1"},
                    {"type": "text", "text": "oi"},
                ],
            }
        )
    )
    assert reply == Message.assistant("Hanoi")  # nosec B101


def test_parse_response_accepts_string_content_and_empty_body(adapter):
    assert adapter.parse_response(_ok({"content": "Hanoi"})).content == "Hanoi"  # nosec B101
    assert adapter.parse_response(WireResponse(status_code=200, body="")).content == ""  # nosec B101


@pytest.mark.parametrize(
    "body",
    ["{not json", "[1, 2]", json.dumps({"id": "msg_1"}), json.dumps({"content": [{"type": "text"}]})],
)
def test_parse_response_malformed_is_protocol_error(adapter, body):
    with pytest.raises(ProviderError) as exc:
        adapter.parse_response(WireResponse(status_code=200, body=body), model="m")
    assert exc.value.kind is ErrorKind.PROTOCOL_ERROR  # nosec B101
    assert exc.value.provider == "anthropic"  # nosec B101


@pytest.mark.parametrize(
    "status,error_type,kind",
    [
        (400, "invalid_request_error", ErrorKind.INVALID_REQUEST),
        (401, "authentication_error", ErrorKind.UNAUTHORIZED),
        (403, "permission_error", ErrorKind.UNAUTHORIZED),
        (429, "rate_limit_error", ErrorKind.RATE_LIMITED),
        (500, "api_error", ErrorKind.PROVIDER_UNAVAILABLE),
        (529, "overloaded_error", ErrorKind.PROVIDER_UNAVAILABLE),
        (404, "not_found_error", ErrorKind.INVALID_REQUEST),
    ],
)
def test_error_statuses_map_to_kinds(adapter, status, error_type, kind):
    body = json.dumps({"type": "error", "error": {"type": error_type, "message": "nope"}})
    err = adapter.map_error_response(WireResponse(status_code=status, body=body), model="m")
    assert err.kind is kind  # nosec B101
    assert err.status_code == status  # nosec B101
    assert "nope" in err.message and error_type in err.message  # nosec B101
    with pytest.raises(ProviderError):
        adapter.parse_response(WireResponse(status_code=status, body=body))


def test_rate_limit_carries_retry_after(adapter):
    err = adapter.map_error_response(
        WireResponse(status_code=429, body="", headers={"retry-after": "12"})
    )
    assert err.kind is ErrorKind.RATE_LIMITED  # nosec B101
    assert err.retry_after == 12.0  # nosec B101
    assert err.message == "HTTP 429"  # nosec B101


def test_in_band_error_on_success_status(adapter):
    body = json.dumps({"type": "error", "error": {"type": "overloaded_error", "message": "busy"}})
    with pytest.raises(ProviderError) as exc:
        adapter.parse_response(WireResponse(status_code=200, body=body))
    assert exc.value.kind is ErrorKind.PROVIDER_UNAVAILABLE  # nosec B101


def _event(payload) -> SseEvent:
    return SseEvent(data=json.dumps(payload), event=payload.get("type"))


def test_stream_frames_translate(adapter):
    delta = adapter.parse_stream_chunk(
        _event({"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Ha"}})
    )
    assert delta.content == "Ha" and not delta.is_final  # nosec B101

    stop = adapter.parse_stream_chunk(_event({"type": "message_delta", "delta": {"stop_reason": "end_turn"}}))
    assert stop.content == "" and stop.stop_reason == "end_turn"  # nosec B101

    assert adapter.parse_stream_chunk(_event({"type": "message_stop"})) is END_OF_STREAM  # nosec B101
    assert adapter.parse_stream_chunk(_event({"type": "ping"})) is None  # nosec B101
    assert adapter.parse_stream_chunk(_event({"type": "message_start", "message": {}})) is None  # nosec B101
    assert adapter.parse_stream_chunk(SseEvent(data="", event="message_stop")) is END_OF_STREAM  # nosec B101


def test_stream_error_frames(adapter):
    with pytest.raises(ProviderError) as exc:
        adapter.parse_stream_chunk(
            _event({"type": "error", "error": {"type": "overloaded_error", "message": "busy"}})
        )
    assert exc.value.kind is ErrorKind.PROVIDER_UNAVAILABLE  # nosec B101

    with pytest.raises(ProviderError) as exc:
        adapter.parse_stream_chunk(SseEvent(data="{broken", event="content_block_delta"))
    assert exc.value.kind is ErrorKind.PROTOCOL_ERROR  # nosec B101
