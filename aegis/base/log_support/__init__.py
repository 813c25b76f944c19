"""Auxiliary logging helpers (formatter, context) used by base.logging."""

from .json_formatter import JsonFormatter, ISO
from .logging_context import LogContext, new_request_id

__all__ = ["JsonFormatter", "ISO", "LogContext", "new_request_id"]
