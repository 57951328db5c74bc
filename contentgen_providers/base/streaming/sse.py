"""Incremental Server-Sent-Events line framing for streamed completions.

Purpose
-------
Turn an unbounded sequence of network byte chunks into the JSON payload
strings carried by ``data:`` lines, without ever interpreting a line before
it is known to be complete.

Algorithm
---------
- Bytes are decoded with a stateful UTF-8 decoder, so a multi-byte character
  split across two reads is completed on the second read rather than
  corrupted.
- Decoded text is appended to a buffer and split on ``\\n``. Every complete
  line is processed; the final fragment (possibly empty) becomes the new
  buffer. Chunk boundaries therefore never lose or duplicate data.
- Lines without the ``data:`` prefix (comments, ``event:``/``id:`` fields,
  blank separators) are ignored. The payload is the rest of the line with
  surrounding whitespace stripped, which also removes a ``\\r`` from CRLF
  framing. The ``[DONE]`` sentinel is swallowed.
- When the byte stream ends, whatever is left in the buffer is an
  unterminated line and is discarded, never parsed.

Invalid UTF-8 is replaced with U+FFFD instead of raising.
"""

from __future__ import annotations

import codecs
from typing import AsyncIterable, AsyncIterator, List, Optional

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def extract_data_payload(line: str) -> Optional[str]:
    """Return the payload of a complete ``data:`` line, else ``None``.

    ``None`` is also returned for the ``[DONE]`` sentinel.
    """
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_SENTINEL:
        return None
    return payload


class SSELineDecoder:
    """Decode buffer for a single streaming call.

    Not shared between calls; create one per response.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """The incomplete trailing fragment held between reads."""
        return self._buffer

    def feed(self, chunk: bytes) -> List[str]:
        """Consume one network chunk and return payloads of completed lines."""
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        payloads: List[str] = []
        for line in lines:
            payload = extract_data_payload(line)
            if payload is not None:
                payloads.append(payload)
        return payloads


async def aiter_event_payloads(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield ``data:`` payloads from an async byte stream as lines complete.

    The trailing unterminated fragment left when ``chunks`` ends is dropped.
    """
    decoder = SSELineDecoder()
    async for chunk in chunks:
        for payload in decoder.feed(chunk):
            yield payload


__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "SSELineDecoder",
    "aiter_event_payloads",
    "extract_data_payload",
]
