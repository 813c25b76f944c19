"""OpenAI chat-completions payload helpers.

Pure functions building the ``/chat/completions`` body and reading the
assistant text out of a completion object.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..base.errors import ErrorKind, ProviderError
from ..base.models import Conversation

PROVIDER_NAME = "openai"
CHAT_PATH = "/chat/completions"

ERROR_TYPE_MAP: Mapping[str, ErrorKind] = {
    "insufficient_quota": ErrorKind.RATE_LIMITED,
    "rate_limit_exceeded": ErrorKind.RATE_LIMITED,
    "invalid_api_key": ErrorKind.UNAUTHORIZED,
    "invalid_request_error": ErrorKind.INVALID_REQUEST,
    "model_not_found": ErrorKind.INVALID_REQUEST,
    "context_length_exceeded": ErrorKind.INVALID_REQUEST,
    "server_error": ErrorKind.PROVIDER_UNAVAILABLE,
}


def build_body(
    conversation: Conversation,
    *,
    model: str,
    max_tokens: int,
    temperature: Optional[float],
    stream: bool,
) -> Dict[str, Any]:
    """Build the chat-completions body; roles pass through unchanged."""
    body: Dict[str, Any] = {
        "model": model,
        "messages": [m.to_dict() for m in conversation],
        "max_tokens": max_tokens,
    }
    if temperature is not None:
        body["temperature"] = temperature
    if stream:
        body["stream"] = True
    return body


def extract_text(data: Mapping[str, Any], *, model: Optional[str] = None) -> str:
    """Return ``choices[0].message.content`` (``null`` becomes ``""``).

    Raises:
        ProviderError: ``PROTOCOL_ERROR`` if the completion shape is wrong.
    """
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], Mapping):
        raise _schema_error("completion has no choices", data, model)
    message = choices[0].get("message")
    if not isinstance(message, Mapping):
        raise _schema_error("choice has no message", data, model)
    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise _schema_error(f"message content is {type(content).__name__}, expected string", data, model)
    return content


def _schema_error(message: str, data: Any, model: Optional[str]) -> ProviderError:
    return ProviderError(
        kind=ErrorKind.PROTOCOL_ERROR,
        message=message,
        provider=PROVIDER_NAME,
        model=model,
        raw=data,
    )


__all__ = ["CHAT_PATH", "ERROR_TYPE_MAP", "PROVIDER_NAME", "build_body", "extract_text"]
