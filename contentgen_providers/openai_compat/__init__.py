"""OpenAI-compatible backend for the ContentGenerator contract."""

from .client import OpenAICompatibleContentGenerator
from .helpers import contents_to_messages, to_response
from .provider_init import OpenAICompatConfig

__all__ = [
    "OpenAICompatibleContentGenerator",
    "OpenAICompatConfig",
    "contents_to_messages",
    "to_response",
]
