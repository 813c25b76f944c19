"""Aegis dispatcher.

The single entry point applications call. ``Aegis`` selects the adapter for
the requested provider, resolves its credential, hands the built request to
the HTTP executor exactly once and returns the parsed reply.

Contract
--------
- ``send_message`` returns an assistant :class:`Message` or raises
  :class:`ProviderError`; no other exception type escapes for provider,
  transport or decoding failures. Wrong argument types still raise
  ``TypeError``.
- ``stream_message`` returns a lazy :class:`MessageStream`; failures arrive
  as its terminal chunk.
- No retries, caching or fallbacks. ``ProviderError.retryable`` tells the
  caller which failures are worth retrying.
- The dispatcher holds only immutable config and injected collaborators, so
  one instance can serve concurrent calls.
"""

from __future__ import annotations

import time
from typing import Dict, List, Optional, Tuple, Union

from .base.errors import ErrorKind, ProviderError, classify_exception
from .base.factory import ProviderFactory
from .base.http import HttpxExecutor
from .base.interfaces import CredentialSource, HttpExecutor, ProviderAdapter
from .base.log_support import LogContext, new_request_id
from .base.logging import get_logger, normalized_log_event
from .base.models import Conversation, Message, ProviderType, WireRequest
from .base.streaming import MessageStream
from .base.utils.messages import validate_conversation
from .config.credentials import StaticCredentialSource
from .config.settings import AegisConfig


class Aegis:
    """Unified async client over the supported LLM providers.

    Parameters
    ----------
    config:
        Immutable settings per provider. Defaults to ``AegisConfig()``.
    credentials:
        Where API keys come from. Defaults to the explicit keys in
        ``config`` only; the environment is never read implicitly.
    executor:
        Transport used for every call. Defaults to an :class:`HttpxExecutor`
        owned (and closed) by this instance.
    """

    def __init__(
        self,
        config: Optional[AegisConfig] = None,
        *,
        credentials: Optional[CredentialSource] = None,
        executor: Optional[HttpExecutor] = None,
    ) -> None:
        if config is None:
            config = AegisConfig()
        if not isinstance(config, AegisConfig):
            raise TypeError(f"config must be AegisConfig, got {type(config).__name__}")
        self._config = config
        self._credentials: CredentialSource = credentials or StaticCredentialSource.from_config(config)
        self._executor: HttpExecutor = executor or HttpxExecutor()
        self._owns_executor = executor is None
        self._adapters: Dict[ProviderType, ProviderAdapter] = {}
        self._logger = get_logger("aegis.dispatcher")

    @property
    def config(self) -> AegisConfig:
        return self._config

    # Introspection -------------------------------------------------------
    def has_provider(self, provider: Union[ProviderType, str]) -> bool:
        """Whether a credential is currently resolvable for ``provider``."""
        return self._credentials.resolve(ProviderType.parse(provider)) is not None

    def providers(self) -> Tuple[ProviderType, ...]:
        """Providers with a resolvable credential, in declaration order."""
        return tuple(p for p in ProviderFactory.supported() if self.has_provider(p))

    # Internals -----------------------------------------------------------
    def _adapter(self, provider: ProviderType) -> ProviderAdapter:
        adapter = self._adapters.get(provider)
        if adapter is None:
            adapter = self._adapters[provider] = ProviderFactory.create(provider)
        return adapter

    def _resolve_key(self, provider: ProviderType, model: str) -> str:
        key = self._credentials.resolve(provider)
        if not key:
            raise ProviderError(
                kind=ErrorKind.MISSING_CREDENTIALS,
                message=f"no API key configured for {provider.display_name} ({provider.env_var})",
                provider=provider.value,
                model=model,
            )
        return key

    def _build(
        self,
        provider: ProviderType,
        conversation: Conversation,
        *,
        stream: bool,
        secret: List[Optional[str]],
    ) -> WireRequest:
        settings = self._config.settings_for(provider)
        validate_conversation(conversation, provider=provider.value, model=settings.model)
        key = self._resolve_key(provider, settings.model)
        secret.append(key)
        return self._adapter(provider).build_request(conversation, settings, key, stream=stream)

    def _transport_error(self, exc: Exception, provider: ProviderType, model: str) -> ProviderError:
        return ProviderError(
            kind=classify_exception(exc),
            message=f"{type(exc).__name__}: {exc}",
            provider=provider.value,
            model=model,
            raw=exc,
        )

    # Operations ----------------------------------------------------------
    async def send_message(self, provider: Union[ProviderType, str], conversation: Conversation) -> Message:
        """Send ``conversation`` and return the assistant reply.

        Steps: validate the conversation, resolve the credential, build the
        request, execute it once, parse the reply. Empty conversations and
        missing credentials fail before any network call.

        Raises:
            ProviderError: classified failure (see ``ErrorKind``).
        """
        provider = ProviderType.parse(provider)
        model = self._config.settings_for(provider).model
        ctx = LogContext(provider=provider.value, model=model, request_id=new_request_id())
        started = time.monotonic()
        secret: List[Optional[str]] = []
        normalized_log_event(self._logger, "chat.start", ctx, phase="start")
        try:
            request = self._build(provider, conversation, stream=False, secret=secret)
            try:
                response = await self._executor.execute(request)
            except ProviderError:
                raise
            except Exception as exc:  # transport failures are classified, not leaked
                raise self._transport_error(exc, provider, model) from exc
            message = self._adapter(provider).parse_response(response, model=model)
        except ProviderError as err:
            err.scrub(*secret)
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="error",
                latency_ms=(time.monotonic() - started) * 1000.0,
                error_code=err.kind.value,
                status_code=err.status_code,
                retryable=err.retryable,
            )
            raise
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            latency_ms=(time.monotonic() - started) * 1000.0,
            emitted=1,
            chars=len(message.content),
        )
        return message

    def stream_message(self, provider: Union[ProviderType, str], conversation: Conversation) -> MessageStream:
        """Return a lazy stream of the assistant reply.

        Nothing happens until the first ``async for`` pull. Validation and
        credential failures surface as a single terminal error chunk with no
        network call. Close the stream (``aclose`` or ``async with``) to stop
        early and release the connection.

        Raises:
            ProviderError: ``INVALID_REQUEST`` for an unknown provider name.
        """
        provider = ProviderType.parse(provider)
        model = self._config.settings_for(provider).model
        secret: List[Optional[str]] = []
        return MessageStream(
            adapter=self._adapter(provider),
            executor=self._executor,
            prepare=lambda: self._build(provider, conversation, stream=True, secret=secret),
            model=model,
            logger=self._logger,
            ctx=LogContext(provider=provider.value, model=model, request_id=new_request_id()),
            secret=lambda: secret[0] if secret else None,
        )

    # Lifecycle -----------------------------------------------------------
    async def aclose(self) -> None:
        """Release the executor's connection pool if this instance owns it."""
        if self._owns_executor:
            await self._executor.aclose()

    async def __aenter__(self) -> "Aegis":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        names = ", ".join(p.value for p in self._config.configured_providers())
        return f"Aegis(configured=[{names}])"


__all__ = ["Aegis"]
