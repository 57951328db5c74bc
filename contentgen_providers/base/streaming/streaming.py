"""Per-stream bookkeeping and envelope accumulation."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..models import Candidate, Content, GenerateContentResponse, Part


@dataclass
class StreamMetrics:
    """Counters for one streaming invocation, reported at finalize.

    Times are milliseconds relative to ``started_at`` (``perf_counter``).
    """

    started_at: float = field(default_factory=time.perf_counter)
    emitted: int = 0
    time_to_first_delta_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def record_emit(self) -> None:
        self.emitted += 1
        if self.time_to_first_delta_ms is None:
            self.time_to_first_delta_ms = (time.perf_counter() - self.started_at) * 1000.0

    def finish(self) -> None:
        self.total_duration_ms = (time.perf_counter() - self.started_at) * 1000.0


def accumulate_responses(responses: Iterable[GenerateContentResponse]) -> GenerateContentResponse:
    """Join the texts of streamed envelopes into one envelope.

    The envelopes emitted by a stream are independent deltas; hosts that want
    the complete answer can fold them with this helper. An empty input yields
    an envelope with empty text.
    """
    text = "".join(r.text for r in responses)
    return GenerateContentResponse(
        candidates=[Candidate(content=Content(role="model", parts=[Part(text=text)]))]
    )


__all__ = ["StreamMetrics", "accumulate_responses"]
