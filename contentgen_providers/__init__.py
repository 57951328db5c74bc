"""contentgen_providers: vendor-neutral content generation over OpenAI-compatible APIs.

Typical use::

    from contentgen_providers import create_content_generator

    gen = create_content_generator("openai", {"api_key": "..."})
    reply = await gen.generate_content({"contents": [{"role": "user", "parts": [{"text": "Hi"}]}]})
    print(reply.text)
"""

from .base import (
    Content,
    ContentGenerator,
    CountTokensParameters,
    CountTokensResponse,
    EmbedContentParameters,
    ErrorCode,
    GenerateContentParameters,
    GenerateContentResponse,
    Part,
    ProviderError,
    accumulate_responses,
)
from .factory import create_content_generator
from .openai_compat import OpenAICompatConfig, OpenAICompatibleContentGenerator

__all__ = [
    "Content",
    "ContentGenerator",
    "CountTokensParameters",
    "CountTokensResponse",
    "EmbedContentParameters",
    "ErrorCode",
    "GenerateContentParameters",
    "GenerateContentResponse",
    "Part",
    "ProviderError",
    "accumulate_responses",
    "create_content_generator",
    "OpenAICompatConfig",
    "OpenAICompatibleContentGenerator",
]
