"""Unified configuration layer.

Goals
-----
* Centralize defaults (models, base URLs, token limits).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults (``aegis.config.defaults``)
    2. Optional config file (JSON or YAML) given explicitly or via ``AEGIS_CONFIG_FILE``
    3. Environment tunables ``<PROVIDER>_MODEL`` / ``<PROVIDER>_BASE_URL``
* Leave API keys to the credential sources (``aegis.config.credentials``).

Config file example::

    anthropic:
      model: claude-3-opus-20240229
      max_tokens: 2048
    openai:
      base_url: https://proxy.internal/v1
      temperature: 0.2

Public API
----------
* ``load_config(path=None, environ=None) -> AegisConfig``
* ``AegisConfig``, ``ProviderSettings``, ``default_settings``
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..base.logging import get_logger
from ..base.models import ProviderType
from .env import CONFIG_FILE_ENV, env_tunables
from .settings import AegisConfig, ProviderSettings, default_settings

_logger = get_logger("aegis.config")


def _read_config_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping at the top level")
    return data


def load_config(
    path: Optional[Union[str, "os.PathLike[str]"]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AegisConfig:
    """Build an :class:`AegisConfig` from defaults, file and environment.

    Parameters
    ----------
    path:
        Config file to load. When omitted, ``AEGIS_CONFIG_FILE`` is used if
        set; a file named by the variable but missing is skipped with a
        warning, while a missing explicit ``path`` raises ``FileNotFoundError``.
    environ:
        Mapping to read instead of ``os.environ``.

    Raises
    ------
    ValueError / yaml.YAMLError / pydantic.ValidationError
        The file is unparseable or holds invalid values.
    """
    env = os.environ if environ is None else environ
    file_data: Dict[str, Any] = {}
    if path is not None:
        file_data = _read_config_file(Path(path))
    elif env.get(CONFIG_FILE_ENV):
        candidate = Path(env[CONFIG_FILE_ENV])
        if candidate.is_file():
            file_data = _read_config_file(candidate)
        else:
            _logger.warning("config file %s from %s not found; using defaults", candidate, CONFIG_FILE_ENV)

    config = AegisConfig.from_mapping(file_data)
    for provider in ProviderType:
        if overrides := env_tunables(provider, env):
            config = config.with_tunables(provider, **overrides)
    return config


__all__ = [
    "AegisConfig",
    "ProviderSettings",
    "default_settings",
    "load_config",
]
