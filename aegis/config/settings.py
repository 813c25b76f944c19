"""Typed, immutable configuration objects.

Purpose
-------
``ProviderSettings`` carries everything an adapter needs to build a request
for one provider; ``AegisConfig`` groups the settings of every supported
provider. Both are frozen pydantic models: builders return new instances and
a config is never mutated once handed to the dispatcher.

Credentials
-----------
API keys are stored as ``SecretStr`` so ``repr``/``str``/``model_dump_json``
never reveal them. An empty or whitespace-only key is treated as no key.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from ..base.models import ProviderType
from .defaults import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MAX_TOKENS,
    OPENAI_DEFAULT_MODEL,
    OPENAI_DEFAULT_TEMPERATURE,
)


class ProviderSettings(BaseModel):
    """Per-provider request settings.

    Attributes
    ----------
    api_key:
        Explicit credential, or ``None`` to defer to the credential source.
    model:
        Model identifier sent with every request.
    base_url:
        API root; adapters append their endpoint path.
    max_tokens:
        Upper bound on generated tokens.
    temperature:
        Sampling temperature; ``None`` omits the field from the request.
    api_version:
        Provider API version header value (Anthropic only).
    headers:
        Extra static headers added to every request.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: Optional[SecretStr] = None
    model: str = Field(min_length=1)
    base_url: str = Field(min_length=1)
    max_tokens: int = Field(gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    api_version: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value: Any) -> Any:
        if value is None:
            return None
        raw = value.get_secret_value() if isinstance(value, SecretStr) else str(value)
        return raw.strip() or None

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def key_value(self) -> Optional[str]:
        """Return the plain key text (only for building the auth header)."""
        return self.api_key.get_secret_value() if self.api_key is not None else None

    def updated(self, **changes: Any) -> "ProviderSettings":
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)


def default_settings(provider: Union[ProviderType, str]) -> ProviderSettings:
    """Built-in settings for ``provider`` (no key)."""
    provider = ProviderType.parse(provider)
    if provider is ProviderType.ANTHROPIC:
        return ProviderSettings(
            model=ANTHROPIC_DEFAULT_MODEL,
            base_url=ANTHROPIC_DEFAULT_BASE_URL,
            max_tokens=ANTHROPIC_DEFAULT_MAX_TOKENS,
            api_version=ANTHROPIC_API_VERSION,
        )
    return ProviderSettings(
        model=OPENAI_DEFAULT_MODEL,
        base_url=OPENAI_DEFAULT_BASE_URL,
        max_tokens=OPENAI_DEFAULT_MAX_TOKENS,
        temperature=OPENAI_DEFAULT_TEMPERATURE,
    )


class AegisConfig(BaseModel):
    """Settings for every supported provider.

    Build one fluently::

        config = AegisConfig().with_anthropic("sk-ant-...").with_openai("sk-...")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    anthropic: ProviderSettings = Field(default_factory=lambda: default_settings(ProviderType.ANTHROPIC))
    openai: ProviderSettings = Field(default_factory=lambda: default_settings(ProviderType.OPENAI))

    def settings_for(self, provider: Union[ProviderType, str]) -> ProviderSettings:
        return getattr(self, ProviderType.parse(provider).value)

    def with_provider(
        self,
        provider: Union[ProviderType, str],
        api_key: Optional[str],
        **tunables: Any,
    ) -> "AegisConfig":
        """Return a copy with ``provider``'s key (and optional tunables) replaced.

        An empty key clears any key previously set.
        """
        provider = ProviderType.parse(provider)
        settings = self.settings_for(provider).updated(api_key=api_key, **tunables)
        return self.model_copy(update={provider.value: settings})

    def with_tunables(self, provider: Union[ProviderType, str], **tunables: Any) -> "AegisConfig":
        """Return a copy with ``provider``'s non-key settings replaced."""
        provider = ProviderType.parse(provider)
        settings = self.settings_for(provider).updated(**tunables)
        return self.model_copy(update={provider.value: settings})

    def with_anthropic(self, api_key: Optional[str], **tunables: Any) -> "AegisConfig":
        return self.with_provider(ProviderType.ANTHROPIC, api_key, **tunables)

    def with_openai(self, api_key: Optional[str], **tunables: Any) -> "AegisConfig":
        return self.with_provider(ProviderType.OPENAI, api_key, **tunables)

    def configured_providers(self) -> Tuple[ProviderType, ...]:
        """Providers holding an explicit key, in declaration order."""
        return tuple(p for p in ProviderType if self.settings_for(p).api_key is not None)

    def is_empty(self) -> bool:
        """True when no provider has an explicit key."""
        return not self.configured_providers()

    def explicit_keys(self) -> Dict[ProviderType, str]:
        out: Dict[ProviderType, str] = {}
        for provider in ProviderType:
            key = self.settings_for(provider).key_value()
            if key is not None:
                out[provider] = key
        return out

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AegisConfig":
        """Overlay per-provider sections of ``data`` onto the built-in defaults.

        Unknown top-level sections raise ``ValueError`` so typos in config
        files are not silently ignored.
        """
        config = cls()
        for name, section in data.items():
            if str(name).lower() not in {p.value for p in ProviderType}:
                raise ValueError(f"unknown provider section '{name}' in config")
            provider = ProviderType.parse(name)
            if section is None:
                continue
            if not isinstance(section, Mapping):
                raise ValueError(f"config section '{name}' must be a mapping")
            config = config.with_tunables(provider, **dict(section))
        return config


__all__ = ["AegisConfig", "ProviderSettings", "default_settings"]
