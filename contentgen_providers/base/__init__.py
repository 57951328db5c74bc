"""Provider-agnostic building blocks: schema, errors, logging, streaming, HTTP."""

from .errors import ErrorCode, ProviderError, classify_exception
from .interfaces import ContentGenerator
from .logging import LogContext, get_logger, log_event, normalized_log_event
from .models import (
    Candidate,
    Content,
    CountTokensParameters,
    CountTokensResponse,
    EmbedContentParameters,
    GenerateContentParameters,
    GenerateContentResponse,
    Part,
    PromptFeedback,
)
from .streaming import SSELineDecoder, StreamMetrics, accumulate_responses

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "ContentGenerator",
    "LogContext",
    "get_logger",
    "log_event",
    "normalized_log_event",
    "Candidate",
    "Content",
    "CountTokensParameters",
    "CountTokensResponse",
    "EmbedContentParameters",
    "GenerateContentParameters",
    "GenerateContentResponse",
    "Part",
    "PromptFeedback",
    "SSELineDecoder",
    "StreamMetrics",
    "accumulate_responses",
]
