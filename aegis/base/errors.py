"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``aegis.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_kind import ErrorKind
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, kind_for_status, parse_retry_after

__all__ = [
    "ErrorKind",
    "ProviderError",
    "classify_exception",
    "kind_for_status",
    "parse_retry_after",
]
