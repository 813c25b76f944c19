"""aegis package

Unified async client for chat-style LLM providers (Anthropic, OpenAI).

Purpose:
    One call site, many wire formats. Applications build an
    :class:`AegisConfig`, construct an :class:`Aegis` dispatcher and call
    ``send_message`` / ``stream_message`` with a provider and a conversation.

Public API (re-exported):
    - Version: ``__version__``
    - Dispatcher: :class:`Aegis`, :class:`MessageStream`, :func:`accumulate_chunks`
    - Models: :class:`Message`, :class:`Role`, :class:`ProviderType`, :class:`ResponseChunk`
    - Errors: :class:`ProviderError`, :class:`ErrorKind`
    - Config: :class:`AegisConfig`, :class:`ProviderSettings`, :func:`load_config`
    - Credentials: :class:`StaticCredentialSource`, :class:`EnvCredentialSource`,
      :class:`ChainedCredentialSource`

Example::

    config = AegisConfig().with_anthropic(api_key)
    async with Aegis(config) as client:
        reply = await client.send_message(ProviderType.ANTHROPIC, [Message.user("Hi")])
"""

from .base.errors import ErrorKind, ProviderError
from .base.models import Message, ProviderType, ResponseChunk, Role
from .base.streaming import MessageStream, accumulate_chunks
from .config import AegisConfig, ProviderSettings, load_config
from .config.credentials import ChainedCredentialSource, EnvCredentialSource, StaticCredentialSource
from .dispatcher import Aegis

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Aegis",
    "AegisConfig",
    "ChainedCredentialSource",
    "EnvCredentialSource",
    "ErrorKind",
    "Message",
    "MessageStream",
    "ProviderError",
    "ProviderSettings",
    "ProviderType",
    "ResponseChunk",
    "Role",
    "StaticCredentialSource",
    "accumulate_chunks",
    "load_config",
]
