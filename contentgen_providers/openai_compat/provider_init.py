"""Immutable settings for an OpenAI-compatible content generator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class OpenAICompatConfig:
    """Credential, endpoint and model shared read-only by every call.

    Attributes:
        api_key: Bearer credential. May be empty for local servers that do
            not check it.
        base_url: API root such as ``https://api.openai.com/v1``; endpoint
            paths are appended to it.
        model: Model identifier sent with every request.
    """

    api_key: str
    base_url: str
    model: str

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "OpenAICompatConfig":
        """Build from a merged provider config mapping (see ``config``)."""
        return cls(
            api_key=str(cfg.get("api_key") or ""),
            base_url=str(cfg.get("base_url") or "").strip(),
            model=str(cfg.get("model") or "").strip(),
        )

    def __repr__(self) -> str:
        return f"OpenAICompatConfig(api_key='***', base_url={self.base_url!r}, model={self.model!r})"


__all__ = ["OpenAICompatConfig"]
