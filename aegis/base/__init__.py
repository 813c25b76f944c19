"""
Aegis Base Package

Provider-agnostic contracts, DTOs and infrastructure shared by the adapters
and the dispatcher:
- Models: messages, provider identifiers, stream chunks, wire DTOs
- Errors: the closed ``ErrorKind`` taxonomy and ``ProviderError``
- Interfaces: the adapter contract and transport/credential Protocols
- Factory: lazy creation of provider adapters
- Streaming, HTTP transport, logging and timeouts
"""

from .errors import ErrorKind, ProviderError, classify_exception, kind_for_status
from .factory import ProviderFactory, UnknownProviderError
from .interfaces import CredentialSource, HttpExecutor, ProviderAdapter, WireStream
from .models import (
    END_OF_STREAM,
    Conversation,
    Message,
    ProviderType,
    ResponseChunk,
    Role,
    WireRequest,
    WireResponse,
)
from .streaming import MessageStream, SseEvent, accumulate_chunks
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "END_OF_STREAM",
    "Conversation",
    "CredentialSource",
    "ErrorKind",
    "HttpExecutor",
    "Message",
    "MessageStream",
    "ProviderAdapter",
    "ProviderError",
    "ProviderFactory",
    "ProviderType",
    "ResponseChunk",
    "Role",
    "SseEvent",
    "TimeoutConfig",
    "UnknownProviderError",
    "WireRequest",
    "WireResponse",
    "WireStream",
    "accumulate_chunks",
    "classify_exception",
    "get_timeout_config",
    "kind_for_status",
]
