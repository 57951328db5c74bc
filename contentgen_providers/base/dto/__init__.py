"""Wire DTOs for upstream APIs."""

from .openai_wire import (
    ChatCompletion,
    ChatCompletionChunk,
    parse_chunk,
    parse_completion,
)

__all__ = [
    "ChatCompletion",
    "ChatCompletionChunk",
    "parse_chunk",
    "parse_completion",
]
