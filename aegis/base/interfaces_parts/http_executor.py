"""HttpExecutor and WireStream Protocols (transport boundary).

The executor is the only component that performs network I/O. It is
injected into the dispatcher so tests can substitute a scripted executor.
"""

from __future__ import annotations

from typing import AsyncIterator, Mapping, Protocol, runtime_checkable

from ..models import WireRequest, WireResponse


@runtime_checkable
class WireStream(Protocol):
    """An open streaming HTTP response.

    ``aclose`` must release the underlying connection immediately and be
    safe to call more than once.
    """

    @property
    def status_code(self) -> int:
        ...

    @property
    def headers(self) -> Mapping[str, str]:
        ...

    async def aread(self) -> str:
        """Read the remaining body as text (used for error replies)."""
        ...

    def aiter_lines(self) -> AsyncIterator[str]:
        ...

    async def aclose(self) -> None:
        ...


@runtime_checkable
class HttpExecutor(Protocol):
    """Performs one HTTP exchange per call. No retries."""

    async def execute(self, request: WireRequest) -> WireResponse:
        """Send ``request`` and return the complete reply.

        Transport failures (timeouts, connection errors) are raised as
        exceptions; the caller classifies them.
        """
        ...

    async def open_stream(self, request: WireRequest) -> WireStream:
        """Send ``request`` and return the reply with the body unread."""
        ...

    async def aclose(self) -> None:
        ...


__all__ = ["HttpExecutor", "WireStream"]
