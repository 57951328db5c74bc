"""contentgen_providers.config.env
================================

Environment variable names for provider credentials.

Each provider reads ``<PROVIDER>_API_KEY`` first. ``ENV_ALIASES`` lists
additional names accepted after the canonical one, e.g. the generic
``openai_compat`` provider falls back to ``OPENAI_API_KEY``.

Helpers never raise on unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "openai_compat": ("OPENAI_API_KEY",),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder rather than a secret.

    Matches values containing 'placeholder', 'changeme' or 'example', or
    starting with 'test_' (case-insensitive, surrounding spaces ignored).
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical API key variable for ``provider``."""
    return f"{provider.strip().upper()}_API_KEY" if provider and provider.strip() else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield accepted API key variable names, canonical first."""
    canonical = get_env_var_name(provider)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get((provider or "").strip().lower(), ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for the first usable key, else ``(None, None)``.

    Placeholder values are skipped.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
