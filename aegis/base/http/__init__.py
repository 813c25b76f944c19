"""HTTP transport package.

Exposes the httpx-backed executor used by the dispatcher by default.
"""

from .client import HttpxExecutor, HttpxWireStream

__all__ = ["HttpxExecutor", "HttpxWireStream"]
