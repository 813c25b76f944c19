"""Shared pure helpers for provider adapters."""

from .messages import split_system, validate_conversation
from .payloads import decode_json_object, error_from_payload, in_band_error

__all__ = [
    "decode_json_object",
    "error_from_payload",
    "in_band_error",
    "split_system",
    "validate_conversation",
]
