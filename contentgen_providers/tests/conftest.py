"""Pytest fixtures for the providers test suite.

Network access is replaced by ``httpx.MockTransport``: the ``backend`` fixture
patches the generator's client builder so every call still opens and closes
its own ``httpx.AsyncClient``, just with a fake transport underneath.
"""
from __future__ import annotations

from typing import Iterator

import httpx
import pytest

from contentgen_providers.config import reset_config_cache
from contentgen_providers.openai_compat import OpenAICompatConfig
from contentgen_providers.tests.utils import MockBackend

_ISOLATED_ENV = (
    "CONTENTGEN_CONFIG_FILE",
    "CONTENTGEN_LOG_LEVEL",
    "CONTENTGEN_TIMEOUT_CONNECT_SECONDS",
    "CONTENTGEN_TIMEOUT_HTTP_SECONDS",
    "CONTENTGEN_TIMEOUT_STREAM_SECONDS",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "OPENAI_COMPAT_API_KEY",
    "OPENAI_COMPAT_BASE_URL",
    "OPENAI_COMPAT_MODEL",
    "OPENROUTER_API_KEY",
    "OPENROUTER_BASE_URL",
    "OPENROUTER_MODEL",
    "OLLAMA_API_KEY",
    "OLLAMA_BASE_URL",
    "OLLAMA_MODEL",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Hide developer credentials/config from tests and reset cached files."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def compat_config() -> OpenAICompatConfig:
    return OpenAICompatConfig(api_key="sk-live-123", base_url="https://llm.internal/v1", model="unit-model")


@pytest.fixture()
def backend(monkeypatch: pytest.MonkeyPatch) -> MockBackend:
    """Route every client the generator builds through a ``MockBackend``."""
    import contentgen_providers.openai_compat.client as client_mod

    mock = MockBackend()
    real_build = client_mod.build_async_client

    def _build(base_url=None, *, transport=None):
        client = real_build(base_url, transport=httpx.MockTransport(mock))
        mock.clients.append(client)
        return client

    monkeypatch.setattr(client_mod, "build_async_client", _build)
    return mock
