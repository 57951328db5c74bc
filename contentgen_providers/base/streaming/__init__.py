"""Streaming primitives: SSE line framing, metrics and accumulation."""

from .sse import DATA_PREFIX, DONE_SENTINEL, SSELineDecoder, aiter_event_payloads, extract_data_payload
from .streaming import StreamMetrics, accumulate_responses

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "SSELineDecoder",
    "aiter_event_payloads",
    "extract_data_payload",
    "StreamMetrics",
    "accumulate_responses",
]
