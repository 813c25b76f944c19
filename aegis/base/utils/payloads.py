"""JSON payload helpers used by adapters to decode replies and error bodies."""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from ..errors import ErrorKind, ProviderError, kind_for_status, parse_retry_after
from ..models import WireResponse

_MAX_MESSAGE_CHARS = 500


def decode_json_object(text: str, *, provider: str, model: Optional[str] = None) -> Dict[str, Any]:
    """Decode ``text`` into a JSON object or raise ``PROTOCOL_ERROR``."""
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ProviderError(
            kind=ErrorKind.PROTOCOL_ERROR,
            message=f"malformed JSON from provider: {exc}",
            provider=provider,
            model=model,
            raw=text,
        ) from exc
    if not isinstance(data, dict):
        raise ProviderError(
            kind=ErrorKind.PROTOCOL_ERROR,
            message=f"expected a JSON object, got {type(data).__name__}",
            provider=provider,
            model=model,
            raw=text,
        )
    return data


def _error_fields(body: str) -> tuple[Optional[str], Optional[str], Optional[str], Any]:
    """Extract ``(type, code, message, payload)`` from an ``{"error": {...}}`` body."""
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        return None, None, None, body
    if not isinstance(payload, dict):
        return None, None, None, payload
    error = payload.get("error")
    if isinstance(error, str):
        return None, None, error, payload
    if not isinstance(error, dict):
        return None, None, None, payload
    code = error.get("code")
    message = error.get("message")
    return (
        error.get("type") if isinstance(error.get("type"), str) else None,
        str(code) if code is not None else None,
        message if isinstance(message, str) else None,
        payload,
    )


def kind_for_error_type(
    error_type: Optional[str],
    error_code: Optional[str],
    type_map: Mapping[str, ErrorKind],
) -> Optional[ErrorKind]:
    """Look up a provider error ``code`` first, then its ``type``."""
    for key in (error_code, error_type):
        if key and key in type_map:
            return type_map[key]
    return None


def error_from_payload(
    response: WireResponse,
    *,
    provider: str,
    model: Optional[str],
    type_map: Mapping[str, ErrorKind],
) -> ProviderError:
    """Build a :class:`ProviderError` for an HTTP error reply.

    The HTTP status decides the kind when it is one the taxonomy maps;
    otherwise the provider's error ``code``/``type`` decides. The provider's
    message is kept (truncated) and the decoded body goes to ``raw``.
    """
    error_type, error_code, text, payload = _error_fields(response.body)
    kind = kind_for_status(response.status_code)
    if kind is ErrorKind.PROTOCOL_ERROR:
        kind = kind_for_error_type(error_type, error_code, type_map) or kind
    detail = (text or "").strip() or f"HTTP {response.status_code}"
    if len(detail) > _MAX_MESSAGE_CHARS:
        detail = detail[:_MAX_MESSAGE_CHARS] + "..."
    label = error_code or error_type
    message = f"{detail} ({label})" if label else detail
    return ProviderError(
        kind=kind,
        message=message,
        provider=provider,
        model=model,
        status_code=response.status_code,
        retry_after=parse_retry_after(response.headers),
        raw=payload,
    )


def in_band_error(
    payload: Mapping[str, Any],
    *,
    provider: str,
    model: Optional[str],
    type_map: Mapping[str, ErrorKind],
) -> ProviderError:
    """Build a :class:`ProviderError` for an error delivered inside a stream."""
    error = payload.get("error")
    error = error if isinstance(error, dict) else {}
    error_type = error.get("type") if isinstance(error.get("type"), str) else None
    error_code = str(error["code"]) if error.get("code") is not None else None
    kind = kind_for_error_type(error_type, error_code, type_map) or ErrorKind.PROTOCOL_ERROR
    text = error.get("message") if isinstance(error.get("message"), str) else "stream error"
    label = error_code or error_type
    return ProviderError(
        kind=kind,
        message=f"{text} ({label})" if label else text,
        provider=provider,
        model=model,
        raw=dict(payload),
    )


__all__ = ["decode_json_object", "error_from_payload", "in_band_error", "kind_for_error_type"]
