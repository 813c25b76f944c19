"""Interfaces split into single-class modules.

``aegis.base.interfaces`` re-exports a stable API from this package.
"""

from .credential_source import CredentialSource
from .http_executor import HttpExecutor, WireStream
from .provider_adapter import ProviderAdapter, StreamItem

__all__ = [
    "CredentialSource",
    "HttpExecutor",
    "ProviderAdapter",
    "StreamItem",
    "WireStream",
]
