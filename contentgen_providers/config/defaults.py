"""contentgen_providers.config.defaults
=====================================

Built-in fallbacks for provider settings. Plain constants only; no I/O and
no imports from other packages so this module can be loaded anywhere.
"""

from __future__ import annotations

# Generic OpenAI-compatible endpoint (vLLM, LM Studio, llama.cpp, ...).
# No base URL default: it must come from config, env or overrides.
OPENAI_COMPAT_DEFAULT_MODEL = "gpt-4o-mini"

OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# Ollama exposes its OpenAI-compatible API under /v1.
OLLAMA_DEFAULT_MODEL = "llama3.1"
OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434/v1"

# Provider used by the factory when none is named.
DEFAULT_PROVIDER = "openai_compat"
