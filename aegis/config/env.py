"""aegis.config.env
================

Environment variable names recognized by aegis and small lookup helpers.

Credential variables follow ``<PROVIDER>_API_KEY``; per-provider tunables
follow ``<PROVIDER>_MODEL`` and ``<PROVIDER>_BASE_URL``. Helpers never raise
for unset variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from ..base.models import ProviderType

ENV_MAP: Dict[ProviderType, str] = {p: p.env_var for p in ProviderType}

CONFIG_FILE_ENV = "AEGIS_CONFIG_FILE"
USE_MOCKS_ENV = "AEGIS_USE_MOCKS"

ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
}

_TRUTHY = {"1", "true", "yes", "on"}


def get_env_var_name(provider: ProviderType) -> str:
    """Return the API key variable for ``provider`` (e.g. ``OPENAI_API_KEY``)."""
    return ENV_MAP[ProviderType.parse(provider)]


def env_tunables(provider: ProviderType, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect non-empty ``<PROVIDER>_MODEL`` / ``<PROVIDER>_BASE_URL`` values."""
    env = os.environ if environ is None else environ
    prefix = ProviderType.parse(provider).value.upper()
    out: Dict[str, str] = {}
    for field, suffix in ENV_FIELD_MAP.items():
        value = (env.get(f"{prefix}_{suffix}") or "").strip()
        if value:
            out[field] = value
    return out


def use_mocks(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Whether ``AEGIS_USE_MOCKS`` asks for the scripted mock executor."""
    env = os.environ if environ is None else environ
    return (env.get(USE_MOCKS_ENV) or "").strip().lower() in _TRUTHY


__all__ = [
    "CONFIG_FILE_ENV",
    "ENV_FIELD_MAP",
    "ENV_MAP",
    "USE_MOCKS_ENV",
    "env_tunables",
    "get_env_var_name",
    "use_mocks",
]
