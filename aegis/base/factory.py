"""Provider Factory.

Maps each :class:`ProviderType` to its adapter class. Adapter modules are
imported lazily with ``importlib`` so importing the factory has no provider
side effects. The factory performs no retries or fallbacks; it either returns
an adapter instance or raises :class:`UnknownProviderError`.
"""

from __future__ import annotations

from importlib import import_module
from typing import Dict, Tuple, Type, Union

from .interfaces import ProviderAdapter
from .models import ProviderType


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved to an adapter.

    Failure modes:
    - The provider is not registered in the factory mapping.
    - The adapter module cannot be imported or lacks the adapter class.
    """


class ProviderFactory:
    """Create provider adapters from a :class:`ProviderType`."""

    _PROVIDERS: Dict[ProviderType, Dict[str, str]] = {
        ProviderType.ANTHROPIC: {"module": "aegis.anthropic.client", "class": "AnthropicAdapter"},
        ProviderType.OPENAI: {"module": "aegis.openai.client", "class": "OpenAIAdapter"},
    }

    @classmethod
    def adapter_class(cls, provider: Union[ProviderType, str]) -> Type[ProviderAdapter]:
        """Resolve (importing on first use) the adapter class for ``provider``."""
        if not isinstance(provider, ProviderType):
            try:
                provider = ProviderType((provider or "").strip().lower())
            except ValueError:
                raise UnknownProviderError(f"Unknown provider '{provider}'") from None
        spec = cls._PROVIDERS.get(provider)
        if spec is None:
            raise UnknownProviderError(f"No adapter registered for provider '{provider.value}'")

        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - packaging failure
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider.value}': {exc}"
            ) from exc
        try:
            return getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}'"
            ) from exc

    @classmethod
    def create(cls, provider: Union[ProviderType, str]) -> ProviderAdapter:
        """Return a new adapter instance for ``provider``."""
        return cls.adapter_class(provider)()

    @classmethod
    def supported(cls) -> Tuple[ProviderType, ...]:
        """Registered providers in deterministic order."""
        return tuple(cls._PROVIDERS)


def create_adapter(provider: Union[ProviderType, str]) -> ProviderAdapter:
    """Shorthand for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider)


__all__ = ["ProviderFactory", "UnknownProviderError", "create_adapter"]
