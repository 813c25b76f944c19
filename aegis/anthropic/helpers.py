"""Anthropic helpers module.

Side-effect-free utilities for the Anthropic Messages API adapter: request
body construction, reply text extraction and the provider error-type table.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.errors import ErrorKind, ProviderError
from ..base.models import Conversation
from ..base.utils.messages import split_system

PROVIDER_NAME = "anthropic"
MESSAGES_PATH = "/v1/messages"

ERROR_TYPE_MAP: Mapping[str, ErrorKind] = {
    "invalid_request_error": ErrorKind.INVALID_REQUEST,
    "not_found_error": ErrorKind.INVALID_REQUEST,
    "request_too_large": ErrorKind.INVALID_REQUEST,
    "authentication_error": ErrorKind.UNAUTHORIZED,
    "permission_error": ErrorKind.UNAUTHORIZED,
    "rate_limit_error": ErrorKind.RATE_LIMITED,
    "api_error": ErrorKind.PROVIDER_UNAVAILABLE,
    "overloaded_error": ErrorKind.PROVIDER_UNAVAILABLE,
}


def build_body(
    conversation: Conversation,
    *,
    model: str,
    max_tokens: int,
    temperature: Optional[float],
    stream: bool,
) -> Dict[str, Any]:
    """Build the ``/v1/messages`` body.

    System messages are lifted into the top-level ``system`` field; the
    remaining turns keep their order.

    Raises:
        ProviderError: ``INVALID_REQUEST`` when only system messages remain.
    """
    system, turns = split_system(conversation)
    if not turns:
        raise ProviderError(
            kind=ErrorKind.INVALID_REQUEST,
            message="conversation has no user or assistant messages",
            provider=PROVIDER_NAME,
            model=model,
        )
    body: Dict[str, Any] = {
        "model": model,
        "max_tokens": max_tokens,
        "messages": [m.to_dict() for m in turns],
    }
    if system is not None:
        body["system"] = system
    if temperature is not None:
        body["temperature"] = temperature
    if stream:
        body["stream"] = True
    return body


def extract_text(data: Mapping[str, Any], *, model: Optional[str] = None) -> str:
    """Return the reply text of a Messages API response object.

    ``content`` is normally a list of blocks; the ``text`` of every text
    block is concatenated in order and other block types are skipped. A
    plain string ``content`` (or top-level ``text``) is accepted as-is.

    Raises:
        ProviderError: ``PROTOCOL_ERROR`` when no text field can be found.
    """
    content = data.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for block in content:
            if not isinstance(block, Mapping):
                raise _schema_error(f"content block is {type(block).__name__}, expected object", data, model)
            if block.get("type", "text") == "text":
                text = block.get("text")
                if not isinstance(text, str):
                    raise _schema_error("text block without text", data, model)
                parts.append(text)
        return "".join(parts)
    if content is None and isinstance(data.get("text"), str):
        return data["text"]
    raise _schema_error("response has no content", data, model)


def _schema_error(message: str, data: Any, model: Optional[str]) -> ProviderError:
    return ProviderError(
        kind=ErrorKind.PROTOCOL_ERROR,
        message=message,
        provider=PROVIDER_NAME,
        model=model,
        raw=data,
    )


__all__ = ["ERROR_TYPE_MAP", "MESSAGES_PATH", "PROVIDER_NAME", "build_body", "extract_text"]
