"""Credential sources.

Resolve a provider's API key with an explicit, injectable priority order.
Sources only read values; none of them mutates ``os.environ`` or logs a key.

- ``StaticCredentialSource``: keys passed in code (built from ``AegisConfig``).
- ``EnvCredentialSource``: ``<PROVIDER>_API_KEY`` from an environment mapping,
  then from a ``.env`` file parsed with python-dotenv.
- ``ChainedCredentialSource``: first source with a non-empty key wins.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple, Union

from dotenv import dotenv_values

from ..base.interfaces import CredentialSource
from ..base.models import ProviderType
from .env import ENV_MAP
from .settings import AegisConfig


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class KeyResolution:
    """Outcome of a key lookup; records where it came from, never the key."""

    provider: ProviderType
    source: str
    found: bool


class StaticCredentialSource:
    """Keys supplied explicitly by the caller."""

    name = "static"

    def __init__(self, keys: Optional[Mapping[Union[ProviderType, str], Optional[str]]] = None) -> None:
        self._keys: Dict[ProviderType, str] = {}
        for provider, key in (keys or {}).items():
            cleaned = _clean(key)
            if cleaned is not None:
                self._keys[ProviderType.parse(provider)] = cleaned

    @classmethod
    def from_config(cls, config: AegisConfig) -> "StaticCredentialSource":
        return cls(config.explicit_keys())

    def resolve(self, provider: ProviderType) -> Optional[str]:
        return self._keys.get(ProviderType.parse(provider))

    def __repr__(self) -> str:
        return f"StaticCredentialSource(providers={sorted(p.value for p in self._keys)})"


class EnvCredentialSource:
    """Keys from environment variables, falling back to a ``.env`` file.

    Parameters
    ----------
    environ:
        Mapping to read instead of ``os.environ`` (tests inject a dict).
    dotenv_path:
        ``.env`` file consulted when the variable is unset or empty. ``None``
        disables the fallback. A missing file simply yields no keys.
    """

    name = "env"

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Union[str, "os.PathLike[str]"]] = ".env",
    ) -> None:
        self._environ = environ
        self._dotenv_path = dotenv_path

    def _dotenv(self) -> Mapping[str, Optional[str]]:
        if self._dotenv_path is None or not os.path.isfile(self._dotenv_path):
            return {}
        return dotenv_values(self._dotenv_path)

    def resolve(self, provider: ProviderType) -> Optional[str]:
        var = ENV_MAP[ProviderType.parse(provider)]
        env = os.environ if self._environ is None else self._environ
        value = _clean(env.get(var))
        if value is not None:
            return value
        return _clean(self._dotenv().get(var))

    def __repr__(self) -> str:
        return f"EnvCredentialSource(dotenv_path={self._dotenv_path!r})"


class ChainedCredentialSource:
    """Query ``sources`` in order; the first non-empty key wins."""

    name = "chain"

    def __init__(self, *sources: CredentialSource) -> None:
        self._sources: Tuple[CredentialSource, ...] = sources

    def resolve(self, provider: ProviderType) -> Optional[str]:
        for source in self._sources:
            key = _clean(source.resolve(provider))
            if key is not None:
                return key
        return None

    def resolution(self, provider: ProviderType) -> KeyResolution:
        """Report which source would answer for ``provider``."""
        provider = ProviderType.parse(provider)
        for source in self._sources:
            if _clean(source.resolve(provider)) is not None:
                return KeyResolution(provider=provider, source=_source_name(source), found=True)
        return KeyResolution(provider=provider, source="none", found=False)

    def __repr__(self) -> str:
        return f"ChainedCredentialSource({', '.join(_source_name(s) for s in self._sources)})"


def _source_name(source: CredentialSource) -> str:
    return getattr(source, "name", type(source).__name__)


def default_credentials(config: AegisConfig, *, include_env: bool = False, dotenv_path: Optional[str] = ".env") -> CredentialSource:
    """Credential source for ``config``.

    Explicit config keys always come first. The environment (and ``.env``)
    is consulted only when ``include_env`` is set, which is what the CLI does.
    """
    static = StaticCredentialSource.from_config(config)
    if not include_env:
        return static
    return ChainedCredentialSource(static, EnvCredentialSource(dotenv_path=dotenv_path))


__all__ = [
    "ChainedCredentialSource",
    "CredentialSource",
    "EnvCredentialSource",
    "KeyResolution",
    "StaticCredentialSource",
    "default_credentials",
]
