"""Layered configuration for content generation providers.

Sources are merged in this order, later winning:

1. Built-in defaults (``config.defaults``)
2. Optional external file named by ``CONTENTGEN_CONFIG_FILE`` (JSON, or YAML
   when the text is not valid JSON)
3. Environment variables ``<PROVIDER>_MODEL``, ``<PROVIDER>_BASE_URL`` and
   ``<PROVIDER>_API_KEY`` (plus aliases from ``config.env``)
4. Explicit overrides passed by the caller (``None`` values ignored)

Placeholder API keys (``changeme``, ``test_...``) are treated as unset.

Example file::

    openai_compat:
      base_url: http://localhost:8000/v1
      model: qwen2.5-7b-instruct
    openrouter:
      model: meta-llama/llama-3.1-70b-instruct
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..base.logging import get_logger, log_event
from .defaults import (
    OLLAMA_DEFAULT_BASE_URL,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_COMPAT_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
)
from .env import is_placeholder, resolve_provider_key

CONFIG_FILE_ENV = "CONTENTGEN_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai_compat": {"model": OPENAI_COMPAT_DEFAULT_MODEL},
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "openrouter": {"model": OPENROUTER_DEFAULT_MODEL, "base_url": OPENROUTER_DEFAULT_BASE_URL},
    "ollama": {"model": OLLAMA_DEFAULT_MODEL, "base_url": OLLAMA_DEFAULT_BASE_URL},
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
}

_FILE_CACHE: Dict[str, Dict[str, Any]] = {}


def _parse_config_text(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return yaml.safe_load(text)


def _load_external_config() -> Dict[str, Any]:
    """Return the parsed config file, cached per path. Missing file -> ``{}``."""
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    if path in _FILE_CACHE:
        return _FILE_CACHE[path]
    p = Path(path)
    data: Any = {}
    if p.exists():
        try:
            data = _parse_config_text(p.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            log_event(
                get_logger("contentgen.config"),
                "config.file_invalid",
                path=str(p),
                error=str(exc),
            )
            data = {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE[path] = data
    return data


def reset_config_cache() -> None:
    """Forget parsed config files (tests and long-lived hosts that edit them)."""
    _FILE_CACHE.clear()


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field_name, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field_name] = val
    key, _ = resolve_provider_key(provider)
    if key:
        out["api_key"] = key
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged configuration mapping for ``provider``.

    Merge order (later wins): defaults -> config file -> env vars -> overrides.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    if is_placeholder(cfg.get("api_key")):
        cfg.pop("api_key")
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "get_provider_config",
    "get_model",
    "reset_config_cache",
]
