"""CredentialSource Protocol (single-class module)."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models import ProviderType


@runtime_checkable
class CredentialSource(Protocol):
    """Supplies an API key per provider.

    ``resolve`` returns ``None`` (never an empty string) when no key is
    available. Implementations must not log or expose the key.
    """

    def resolve(self, provider: ProviderType) -> Optional[str]:
        ...


__all__ = ["CredentialSource"]
