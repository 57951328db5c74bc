"""Shared fakes for the providers test suite.

Purpose:
    Give tests a network-free HTTP backend (``httpx.MockTransport`` driven by
    ``MockBackend``) and a response body (``ChunkStream``) that delivers bytes
    in exactly the chunking a test asks for, so framing edge cases can be
    reproduced deterministically.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Iterable, List, Optional

import httpx


class ChunkStream(httpx.AsyncByteStream):
    """Async response body delivering exactly the given byte chunks.

    Records how many chunks were pulled and whether httpx closed it, so tests
    can observe early release of the response.
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = list(chunks)
        self.pulled = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self._chunks:
            self.pulled += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


def sse(*payloads: str) -> bytes:
    """Frame each payload as ``data: <payload>\\n`` and concatenate."""
    return "".join(f"data: {p}\n" for p in payloads).encode("utf-8")


def delta_event(text: Optional[str]) -> str:
    return json.dumps({"choices": [{"index": 0, "delta": {"content": text}}]})


def split_bytes(data: bytes, size: int = 1) -> List[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


class MockBackend:
    """Callable handler for ``httpx.MockTransport`` that records requests."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.clients: List[httpx.AsyncClient] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"choices": []}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def respond_json(self, body: Any, status_code: int = 200) -> None:
        self.responder = lambda request: httpx.Response(status_code, json=body)

    def respond_text(self, text: str, status_code: int = 200) -> None:
        self.responder = lambda request: httpx.Response(status_code, text=text)

    def respond_stream(self, chunks: Iterable[bytes], status_code: int = 200) -> ChunkStream:
        stream = ChunkStream(chunks)
        self.responder = lambda request: httpx.Response(
            status_code, headers={"content-type": "text/event-stream"}, stream=stream
        )
        return stream

    def fail_with(self, exc_factory: Callable[[httpx.Request], Exception]) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_factory(request)

        self.responder = _raise

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


def log_events(captured_err: str) -> List[dict]:
    """Parse the JSON log lines found in captured stderr."""
    events = []
    for line in captured_err.splitlines():
        line = line.strip()
        if line.startswith("{"):
            events.append(json.loads(line))
    return events


def find_event(events: List[dict], name: str) -> Optional[dict]:
    return next((e for e in events if e.get("event") == name), None)


def text_block(role: Optional[str], *texts: Optional[str]) -> dict:
    return {"role": role, "parts": [{"text": t} for t in texts]}


__all__ = [
    "ChunkStream",
    "MockBackend",
    "delta_event",
    "find_event",
    "log_events",
    "split_bytes",
    "sse",
    "text_block",
]
