"""Shared fixtures for the aegis test suite.

Every test runs without network access: the dispatcher is wired to the
scripted ``MockExecutor`` and the process environment is scrubbed of
provider keys and aegis toggles so a developer's shell cannot leak into
assertions.
"""

from __future__ import annotations

import logging
from typing import Iterator

import pytest

from aegis import Aegis, AegisConfig
from aegis.mock import MockExecutor

from .utils import ANTHROPIC_KEY, OPENAI_KEY, ListHandler

_SCRUBBED_ENV = (
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_BASE_URL",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "AEGIS_CONFIG_FILE",
    "AEGIS_USE_MOCKS",
    "AEGIS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Remove provider keys/toggles and run each test from an empty directory."""
    for name in _SCRUBBED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture()
def log_capture() -> Iterator[ListHandler]:
    """Attach a list handler to the shared ``aegis`` logger at DEBUG level."""
    logger = logging.getLogger("aegis")
    handler = ListHandler()
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


@pytest.fixture()
def mock_executor() -> MockExecutor:
    """Executor with an empty script that refuses unscripted requests."""
    return MockExecutor(echo=False)


@pytest.fixture()
def config() -> AegisConfig:
    return AegisConfig().with_anthropic(ANTHROPIC_KEY).with_openai(OPENAI_KEY)


@pytest.fixture()
def client(config: AegisConfig, mock_executor: MockExecutor) -> Aegis:
    return Aegis(config, executor=mock_executor)
