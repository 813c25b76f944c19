"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``aegis.base.models_parts`` so call sites have a single stable import path.
"""

from .models_parts.message import Conversation, Message, Role
from .models_parts.provider_type import ProviderType
from .models_parts.response_chunk import END_OF_STREAM, ResponseChunk
from .models_parts.wire import WireRequest, WireResponse

__all__ = [
    "Conversation",
    "END_OF_STREAM",
    "Message",
    "ProviderType",
    "ResponseChunk",
    "Role",
    "WireRequest",
    "WireResponse",
]
