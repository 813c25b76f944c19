"""Lazy, cancellable stream of response chunks.

A :class:`MessageStream` is returned synchronously by
``Aegis.stream_message`` and does nothing until the first pull. It then
prepares the request, opens the wire stream through the executor and yields
delta chunks in emission order followed by exactly one terminal chunk.

Failures never raise out of iteration: they end the stream with a terminal
chunk whose ``error`` holds the classified :class:`ProviderError`.
``aclose()`` (or leaving ``async with``) before the terminal chunk closes the
underlying connection immediately.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, AsyncGenerator, Callable, Optional

from ..errors import ErrorKind, ProviderError, classify_exception
from ..log_support import LogContext
from ..logging import normalized_log_event
from ..models import END_OF_STREAM, ResponseChunk, WireRequest, WireResponse

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..interfaces import HttpExecutor, ProviderAdapter, WireStream


class MessageStream:
    """Forward-only async iterator of :class:`ResponseChunk`.

    Not restartable: once the terminal chunk has been produced (or the
    stream was closed) further iteration stops immediately.
    """

    def __init__(
        self,
        *,
        adapter: "ProviderAdapter",
        executor: "HttpExecutor",
        prepare: Callable[[], WireRequest],
        model: Optional[str],
        logger: logging.Logger,
        ctx: LogContext,
        secret: Callable[[], Optional[str]] = lambda: None,
    ) -> None:
        self._adapter = adapter
        self._executor = executor
        self._prepare = prepare
        self._model = model
        self._logger = logger
        self._ctx = ctx
        self._secret = secret
        self._gen: Optional[AsyncGenerator[ResponseChunk, None]] = None
        self._wire: Optional["WireStream"] = None
        self._terminal: Optional[ResponseChunk] = None
        self._closed = False
        self._emitted = 0
        self._started_at: Optional[float] = None

    # Iteration -----------------------------------------------------------
    def __aiter__(self) -> "MessageStream":
        return self

    async def __anext__(self) -> ResponseChunk:
        if self._closed or self._terminal is not None:
            raise StopAsyncIteration
        if self._gen is None:
            self._gen = self._run()
        try:
            chunk = await self._gen.__anext__()
        except StopAsyncIteration:
            self._closed = True
            raise
        if chunk.is_final:
            self._terminal = chunk
            self._closed = True
            await self._gen.aclose()
            await self._close_wire()
        return chunk

    async def __aenter__(self) -> "MessageStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # API -----------------------------------------------------------------
    async def aclose(self) -> None:
        """Stop the stream and release its connection. Idempotent."""
        if self._closed:
            return
        cancelled = self._gen is not None and self._terminal is None
        self._closed = True
        if self._gen is not None:
            await self._gen.aclose()
        await self._close_wire()
        if cancelled:
            normalized_log_event(
                self._logger,
                "stream.cancelled",
                self._ctx,
                phase="cancel",
                latency_ms=self._elapsed_ms(),
                emitted=self._emitted,
            )

    @property
    def finished(self) -> bool:
        """Whether the terminal chunk has been produced."""
        return self._terminal is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def terminal_chunk(self) -> Optional[ResponseChunk]:
        return self._terminal

    @property
    def error(self) -> Optional[ProviderError]:
        """Error carried by the terminal chunk, if the stream failed."""
        return self._terminal.error if self._terminal is not None else None

    # Internals -----------------------------------------------------------
    def _elapsed_ms(self) -> Optional[float]:
        if self._started_at is None:
            return None
        return (time.monotonic() - self._started_at) * 1000.0

    async def _close_wire(self) -> None:
        wire, self._wire = self._wire, None
        if wire is not None:
            await wire.aclose()

    def _wrap(self, exc: BaseException) -> ProviderError:
        if isinstance(exc, ProviderError):
            return exc
        return ProviderError(
            kind=classify_exception(exc),
            message=f"{type(exc).__name__}: {exc}",
            provider=self._adapter.provider_name,
            model=self._model,
            raw=exc,
        )

    def _fail(self, error: ProviderError) -> ResponseChunk:
        error.scrub(self._secret())
        event = "stream.decode_error" if error.kind is ErrorKind.PROTOCOL_ERROR else "stream.error"
        normalized_log_event(
            self._logger,
            event,
            self._ctx,
            phase="error",
            latency_ms=self._elapsed_ms(),
            error_code=error.kind.value,
            emitted=self._emitted,
            status_code=error.status_code,
        )
        return ResponseChunk.failure(error)

    def _end(self, stop_reason: Optional[str], *, marker: bool) -> ResponseChunk:
        normalized_log_event(
            self._logger,
            "stream.end",
            self._ctx,
            phase="finalize",
            latency_ms=self._elapsed_ms(),
            emitted=self._emitted,
            stop_reason=stop_reason,
            end_marker=marker,
            level=logging.INFO if marker else logging.WARNING,
        )
        return ResponseChunk.end(stop_reason)

    async def _run(self) -> AsyncGenerator[ResponseChunk, None]:
        self._started_at = time.monotonic()
        try:
            request = self._prepare()
        except ProviderError as err:
            yield self._fail(err)
            return

        normalized_log_event(self._logger, "stream.start", self._ctx, phase="start")
        try:
            self._wire = await self._executor.open_stream(request)
        except Exception as exc:  # transport failures become terminal chunks
            yield self._fail(self._wrap(exc))
            return

        try:
            wire = self._wire
            if wire.status_code >= 400:
                body = await wire.aread()
                response = WireResponse(status_code=wire.status_code, body=body, headers=dict(wire.headers))
                yield self._fail(self._adapter.map_error_response(response, model=self._model))
                return

            stop_reason: Optional[str] = None
            async for event in self._adapter.iter_events(wire.aiter_lines()):
                item = self._adapter.parse_stream_chunk(event, model=self._model)
                if item is END_OF_STREAM:
                    yield self._end(stop_reason, marker=True)
                    return
                if item is None:
                    continue
                if item.stop_reason:
                    stop_reason = item.stop_reason
                if item.content:
                    self._emitted += 1
                    yield ResponseChunk(content=item.content)
            # body ended without the provider's end marker
            yield self._end(stop_reason, marker=False)
        except Exception as exc:  # decode and mid-stream transport failures
            yield self._fail(self._wrap(exc))
        finally:
            await self._close_wire()


__all__ = ["MessageStream"]
