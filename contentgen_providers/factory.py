"""Provider factory.

Resolves settings through ``config.get_provider_config`` and returns a ready
``ContentGenerator``. Every known provider speaks the OpenAI-compatible
protocol, so they differ only in defaults (base URL, model, key variable).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .base.errors import ErrorCode, ProviderError
from .base.interfaces import ContentGenerator
from .config import DEFAULTS, get_provider_config
from .config.defaults import DEFAULT_PROVIDER
from .openai_compat import OpenAICompatConfig, OpenAICompatibleContentGenerator


def create_content_generator(
    provider: str = DEFAULT_PROVIDER,
    overrides: Optional[Dict[str, Any]] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    strict_events: bool = True,
) -> ContentGenerator:
    """Build a content generator for ``provider``.

    Parameters:
        provider: One of ``DEFAULTS`` (``openai_compat``, ``openai``,
            ``openrouter``, ``ollama``).
        overrides: Highest-precedence settings (``api_key``, ``base_url``,
            ``model``).
        client: Optional shared ``httpx.AsyncClient``.
        strict_events: Forwarded to the generator.

    Raises:
        ProviderError: ``VALIDATION`` for an unknown provider or a missing
            base URL / model. A missing API key is allowed.
    """
    name = (provider or "").strip().lower()
    if name not in DEFAULTS:
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"unknown provider {provider!r}; expected one of {sorted(DEFAULTS)}",
            provider=name or "-",
        )
    config = OpenAICompatConfig.from_mapping(get_provider_config(name, overrides))
    missing = [field for field in ("base_url", "model") if not getattr(config, field)]
    if missing:
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"missing {', '.join(missing)}; set {name.upper()}_BASE_URL / {name.upper()}_MODEL or pass overrides",
            provider=name,
            model=config.model or None,
        )
    return OpenAICompatibleContentGenerator(
        config,
        client=client,
        strict_events=strict_events,
        provider_name=name,
    )


__all__ = ["create_content_generator"]
