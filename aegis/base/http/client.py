"""httpx-backed HTTP executor.

Purpose:
    Perform the single network exchange behind each dispatcher call. One
    ``HttpxExecutor`` owns one pooled ``httpx.AsyncClient`` so concurrent
    calls share connections; the client is created lazily on first use.

Timeout strategy:
    Per-request ``httpx.Timeout`` values derive from :class:`TimeoutConfig`
    (``get_timeout_config()`` by default). Streams use the stream idle timeout
    as their read timeout. Elapsed timeouts raise ``httpx.TimeoutException``,
    which the core classifies as ``network``.

Lifecycle:
    ``aclose()`` closes a client created here. A client passed in by the
    caller is left open for the caller to manage.
"""

from __future__ import annotations

from typing import AsyncIterator, Dict, Mapping, Optional

import httpx

from ..logging import get_logger
from ..models import WireRequest, WireResponse
from ..timeouts import TimeoutConfig, get_timeout_config

_logger = get_logger("aegis.http")


class HttpxWireStream:
    """Adapts a streaming ``httpx.Response`` to the ``WireStream`` protocol."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return dict(self._response.headers)

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    async def aread(self) -> str:
        await self._response.aread()
        return self._response.text

    def aiter_lines(self) -> AsyncIterator[str]:
        return self._response.aiter_lines()

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpxExecutor:
    """:class:`HttpExecutor` implementation over ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        timeouts: Optional[TimeoutConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeouts = timeouts or get_timeout_config()
        self._client = client
        self._owns_client = client is None
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            kwargs: Dict[str, object] = {"timeout": self._timeouts.for_request(stream=False)}
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**kwargs)  # type: ignore[arg-type]
        return self._client

    def _build(self, request: WireRequest) -> httpx.Request:
        return self._get_client().build_request(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.json_body(),
            timeout=self._timeouts.for_request(stream=request.stream),
        )

    async def execute(self, request: WireRequest) -> WireResponse:
        _logger.debug("http.request %s %s headers=%s", request.method, request.url, request.redacted_headers())
        response = await self._get_client().send(self._build(request))
        return WireResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )

    async def open_stream(self, request: WireRequest) -> HttpxWireStream:
        _logger.debug("http.stream %s %s headers=%s", request.method, request.url, request.redacted_headers())
        response = await self._get_client().send(self._build(request), stream=True)
        return HttpxWireStream(response)

    async def aclose(self) -> None:
        """Close the pooled client if this executor created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


__all__ = ["HttpxExecutor", "HttpxWireStream"]
