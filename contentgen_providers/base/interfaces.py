"""ContentGenerator Protocol.

The vendor-neutral contract hosts program against. Backends translate these
calls onto their own wire format and must never leak backend payload types
upstream.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Protocol, runtime_checkable

from .models import (
    CountTokensParameters,
    CountTokensResponse,
    EmbedContentParameters,
    GenerateContentParameters,
    GenerateContentResponse,
)


@runtime_checkable
class ContentGenerator(Protocol):
    """Text generation, token counting and embeddings behind one interface."""

    async def generate_content(self, request: GenerateContentParameters) -> GenerateContentResponse:
        """Return one envelope holding the complete generated text."""
        ...

    def generate_content_stream(self, request: GenerateContentParameters) -> AsyncIterator[GenerateContentResponse]:
        """Return a lazy, single-use sequence of envelopes, one per text delta."""
        ...

    async def count_tokens(self, request: CountTokensParameters) -> CountTokensResponse:
        ...

    async def embed_content(self, request: EmbedContentParameters) -> Any:
        ...


__all__ = ["ContentGenerator"]
