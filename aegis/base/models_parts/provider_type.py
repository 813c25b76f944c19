"""
Provider identifier enumeration.

The dispatch boundary accepts only `ProviderType` variants. Free-form text
(e.g. a CLI ``--provider`` flag) is parsed into a variant with
:meth:`ProviderType.parse` before it reaches the core.
"""
from __future__ import annotations

from enum import Enum
from typing import Union

from ..errors_parts.error_kind import ErrorKind
from ..errors_parts.provider_error import ProviderError


class ProviderType(str, Enum):
    """Closed set of supported providers.

    Adding a provider means adding a variant here and registering its adapter
    in :class:`aegis.base.factory.ProviderFactory`.
    """

    ANTHROPIC = "anthropic"
    OPENAI = "openai"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def env_var(self) -> str:
        """Environment variable conventionally holding this provider's key."""
        return f"{self.value.upper()}_API_KEY"

    @classmethod
    def parse(cls, value: Union[str, "ProviderType"]) -> "ProviderType":
        """Parse free-form text into a provider variant (case-insensitive).

        Raises:
            ProviderError: ``INVALID_REQUEST`` for unknown providers.
            TypeError: ``value`` is neither text nor a ``ProviderType``.
        """
        if isinstance(value, ProviderType):
            return value
        if value is not None and not isinstance(value, str):
            raise TypeError(f"provider must be a ProviderType or str, got {type(value).__name__}")
        name = (value or "").strip().lower()
        try:
            return cls(name)
        except ValueError:
            supported = ", ".join(p.value for p in cls)
            raise ProviderError(
                kind=ErrorKind.INVALID_REQUEST,
                message=f"unknown provider '{value}' (supported: {supported})",
                provider=name or "unknown",
            ) from None


_DISPLAY_NAMES = {
    ProviderType.ANTHROPIC: "Anthropic",
    ProviderType.OPENAI: "OpenAI",
}


__all__ = ["ProviderType"]
