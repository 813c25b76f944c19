"""Unit tests for the shared DTOs (messages, provider ids, chunks, wire types)."""

from __future__ import annotations

import json

import pytest

from aegis.base.errors import ErrorKind, ProviderError
from aegis.base.models import (
    END_OF_STREAM,
    Message,
    ProviderType,
    ResponseChunk,
    Role,
    WireRequest,
    WireResponse,
)


def test_message_coerces_role_text():
    msg = Message("user", "hi")
    assert msg.role is Role.USER  # nosec B101
    assert msg.to_dict() == {"role": "user", "content": "hi"}  # nosec B101


def test_message_rejects_unknown_role_and_non_text_content():
    with pytest.raises(ValueError):
        Message("tool", "x")
    with pytest.raises(TypeError):
        Message(Role.USER, 42)  # type: ignore[arg-type]


def test_message_builders():
    assert Message.system("s").role is Role.SYSTEM  # nosec B101
    assert Message.assistant("a").role is Role.ASSISTANT  # nosec B101
    assert Message.user("u") == Message(Role.USER, "u")  # nosec B101


@pytest.mark.parametrize("text", ["anthropic", "Anthropic", " ANTHROPIC "])
def test_provider_parse_is_case_insensitive(text):
    assert ProviderType.parse(text) is ProviderType.ANTHROPIC  # nosec B101


def test_provider_parse_unknown_raises_invalid_request():
    with pytest.raises(ProviderError) as exc:
        ProviderType.parse("gemini")
    assert exc.value.kind is ErrorKind.INVALID_REQUEST  # nosec B101
    assert "gemini" in exc.value.message  # nosec B101


@pytest.mark.parametrize("value", [5, b"openai", ["openai"]])
def test_provider_parse_rejects_non_text(value):
    with pytest.raises(TypeError):
        ProviderType.parse(value)  # type: ignore[arg-type]


def test_provider_metadata():
    assert ProviderType.OPENAI.display_name == "OpenAI"  # nosec B101
    assert ProviderType.ANTHROPIC.env_var == "ANTHROPIC_API_KEY"  # nosec B101
    assert ProviderType.OPENAI.env_var == "OPENAI_API_KEY"  # nosec B101


def test_response_chunk_terminals():
    end = ResponseChunk.end("stop")
    assert end.is_final and end.content == "" and end.stop_reason == "stop"  # nosec B101
    assert not end.is_error()  # nosec B101

    err = ProviderError(kind=ErrorKind.NETWORK, message="boom")
    failed = ResponseChunk.failure(err)
    assert failed.is_final and failed.is_error() and failed.error is err  # nosec B101

    assert not ResponseChunk("x").is_final  # nosec B101


def test_end_of_stream_is_singleton():
    assert type(END_OF_STREAM)() is END_OF_STREAM  # nosec B101


def test_wire_request_redacts_credentials():
    req = WireRequest(
        method="POST",
        url="https://api.example/v1",
        headers={"Authorization": "Bearer sk-secret", "x-api-key": "sk-secret", "accept": "application/json"},
        body={"b": 1, "a": 2},
    )
    redacted = req.redacted_headers()
    assert redacted["Authorization"] == "***"  # nosec B101
    assert redacted["x-api-key"] == "***"  # nosec B101
    assert redacted["accept"] == "application/json"  # nosec B101
    assert "sk-secret" not in repr(req)  # nosec B101
    assert json.loads(req.json_body()) == {"a": 2, "b": 1}  # nosec B101
    assert req.json_body().startswith(b'{"a"')  # nosec B101


def test_wire_response_helpers():
    resp = WireResponse(status_code=429, headers={"Retry-After": "3"})
    assert resp.is_error  # nosec B101
    assert resp.header("retry-after") == "3"  # nosec B101
    assert resp.header("missing") is None  # nosec B101
    assert not WireResponse(status_code=200).is_error  # nosec B101
