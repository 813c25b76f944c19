"""
Provider-agnostic interfaces public surface.

Re-exports the abstract adapter contract and the transport/credential
Protocols from ``aegis.base.interfaces_parts``.
"""

from .interfaces_parts.credential_source import CredentialSource
from .interfaces_parts.http_executor import HttpExecutor, WireStream
from .interfaces_parts.provider_adapter import ProviderAdapter, StreamItem

__all__ = [
    "CredentialSource",
    "HttpExecutor",
    "ProviderAdapter",
    "StreamItem",
    "WireStream",
]
