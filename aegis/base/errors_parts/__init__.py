"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `aegis.base.errors` for the stable surface.
"""

from .error_kind import ErrorKind
from .provider_error import ProviderError
from .classification import classify_exception, kind_for_status, parse_retry_after

__all__ = [
    "ErrorKind",
    "ProviderError",
    "classify_exception",
    "kind_for_status",
    "parse_retry_after",
]
