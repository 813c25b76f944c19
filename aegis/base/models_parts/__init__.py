"""Models parts package public surface.

Re-exports individual DTOs so callers can import from
`aegis.base.models_parts` if needed, while `aegis.base.models` remains
the primary stable import path.
"""

from .message import Conversation, Message, Role
from .provider_type import ProviderType
from .response_chunk import END_OF_STREAM, ResponseChunk
from .wire import WireRequest, WireResponse

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
