"""Streaming ``generate_content_stream`` over mocked SSE bodies."""

from __future__ import annotations

import asyncio
import contextlib
import json
from typing import List

import httpx
import pytest

from contentgen_providers.base.errors import ErrorCode, ProviderError
from contentgen_providers.openai_compat import OpenAICompatibleContentGenerator
from contentgen_providers.tests.utils import (
    ChunkStream,
    delta_event,
    find_event,
    log_events,
    split_bytes,
    sse,
    text_block,
)

REQUEST = {"contents": [text_block("user", "Hi")]}


def collect(gen: OpenAICompatibleContentGenerator, sink: List[str] | None = None) -> List[str]:
    """Drain a stream, appending texts to ``sink`` as they arrive."""
    out = sink if sink is not None else []

    async def run():
        async for resp in gen.generate_content_stream(REQUEST):
            out.append(resp.text)

    asyncio.run(run())
    return out


def test_two_deltas_become_two_envelopes(backend, compat_config):
    backend.respond_stream([sse(delta_event("Hel"), delta_event("lo"), "[DONE]")])
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == ["Hel", "lo"]  # nosec B101 - assert is appropriate in unit tests


def test_each_envelope_is_a_complete_single_candidate(backend, compat_config):
    backend.respond_stream([sse(delta_event("Hel"), delta_event("lo"), "[DONE]")])
    gen = OpenAICompatibleContentGenerator(compat_config)

    async def run():
        return [r async for r in gen.generate_content_stream(REQUEST)]

    envelopes = asyncio.run(run())
    assert [e.to_dict()["candidates"][0]["finishReason"] for e in envelopes] == ["stop", "stop"]  # nosec B101 - assert is appropriate in unit tests
    assert envelopes[0] is not envelopes[1]  # nosec B101 - assert is appropriate in unit tests


def test_byte_level_chunking_yields_same_sequence(backend, compat_config):
    body = sse(delta_event("Hel"), delta_event("lo wörld 🚀"), "[DONE]")
    backend.respond_stream(split_bytes(body))
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == ["Hel", "lo wörld 🚀"]  # nosec B101 - assert is appropriate in unit tests


def test_request_asks_for_stream(backend, compat_config):
    backend.respond_stream([sse("[DONE]")])
    collect(OpenAICompatibleContentGenerator(compat_config))
    assert backend.last_json() == {  # nosec B101 - assert is appropriate in unit tests
        "model": "unit-model",
        "messages": [{"role": "user", "content": "Hi"}],
        "stream": True,
    }
    assert backend.requests[-1].headers["authorization"] == "Bearer sk-live-123"  # nosec B101 - assert is appropriate in unit tests


def test_done_only_stream_is_empty(backend, compat_config):
    backend.respond_stream([sse("[DONE]")])
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == []  # nosec B101 - assert is appropriate in unit tests


def test_events_without_text_are_skipped(backend, compat_config):
    backend.respond_stream(
        [
            sse(
                json.dumps({"choices": [{"delta": {"role": "assistant"}}]}),
                delta_event(""),
                delta_event(None),
                json.dumps({"choices": []}),
                json.dumps({"id": "chatcmpl-1"}),
                json.dumps({"choices": [{"delta": {"content": 3}}]}),
                "[1, 2]",
                delta_event("real"),
                json.dumps({"choices": [{"delta": {}, "finish_reason": "stop"}]}),
                "[DONE]",
            )
        ]
    )
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == ["real"]  # nosec B101 - assert is appropriate in unit tests


def test_whitespace_delta_is_still_emitted(backend, compat_config):
    backend.respond_stream([sse(delta_event("a"), delta_event(" "), delta_event("b"))])
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == ["a", " ", "b"]  # nosec B101 - assert is appropriate in unit tests


def test_trailing_unterminated_event_is_discarded(backend, compat_config):
    body = sse(delta_event("kept")) + b"data: " + delta_event("lost").encode("utf-8")
    backend.respond_stream([body])
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == ["kept"]  # nosec B101 - assert is appropriate in unit tests


def test_no_body_status_gives_empty_sequence(backend, compat_config, capsys):
    backend.respond_stream([], status_code=204)
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == []  # nosec B101 - assert is appropriate in unit tests
    events = log_events(capsys.readouterr().err)
    assert find_event(events, "stream.no_body")["http_status"] == 204  # nosec B101 - assert is appropriate in unit tests
    assert find_event(events, "stream.finalize")["outcome"] == "no_body"  # nosec B101 - assert is appropriate in unit tests


def test_malformed_event_fails_after_earlier_envelopes(backend, compat_config, capsys):
    backend.respond_stream([sse(delta_event("ok"), "{not json", delta_event("never"))])
    got: List[str] = []
    with pytest.raises(ProviderError) as info:
        collect(OpenAICompatibleContentGenerator(compat_config), got)
    assert got == ["ok"]  # nosec B101 - assert is appropriate in unit tests
    assert info.value.code is ErrorCode.VALIDATION  # nosec B101 - assert is appropriate in unit tests
    assert isinstance(info.value.__cause__, json.JSONDecodeError)  # nosec B101 - assert is appropriate in unit tests
    events = log_events(capsys.readouterr().err)
    assert find_event(events, "stream.error")["error_code"] == "validation"  # nosec B101 - assert is appropriate in unit tests
    final = find_event(events, "stream.finalize")
    assert final["outcome"] == "error"  # nosec B101 - assert is appropriate in unit tests
    assert final["emitted_count"] == 1  # nosec B101 - assert is appropriate in unit tests


def test_empty_data_payload_is_malformed(backend, compat_config):
    backend.respond_stream([b"data:\n"])
    with pytest.raises(ProviderError):
        collect(OpenAICompatibleContentGenerator(compat_config))


def test_lenient_mode_skips_corrupt_event(backend, compat_config, capsys):
    backend.respond_stream([sse(delta_event("ok"), "{not json", delta_event("after"), "[DONE]")])
    gen = OpenAICompatibleContentGenerator(compat_config, strict_events=False)
    assert collect(gen) == ["ok", "after"]  # nosec B101 - assert is appropriate in unit tests
    skipped = find_event(log_events(capsys.readouterr().err), "stream.event_skipped")
    assert skipped["payload_preview"] == "{not json"  # nosec B101 - assert is appropriate in unit tests
    assert skipped["level"] == "WARNING"  # nosec B101 - assert is appropriate in unit tests


def test_stream_is_lazy_until_iterated(backend, compat_config):
    backend.respond_stream([sse(delta_event("x"))])
    gen = OpenAICompatibleContentGenerator(compat_config)

    async def run():
        it = gen.generate_content_stream(REQUEST)
        before = len(backend.requests)
        first = await it.__anext__()
        await it.aclose()
        return before, first.text

    before, first = asyncio.run(run())
    assert before == 0  # nosec B101 - assert is appropriate in unit tests
    assert first == "x"  # nosec B101 - assert is appropriate in unit tests


def test_early_abandonment_releases_response(backend, compat_config, capsys):
    stream = backend.respond_stream([sse(delta_event("a")), sse(delta_event("b")), sse(delta_event("c"))])
    gen = OpenAICompatibleContentGenerator(compat_config)

    async def run():
        got = []
        async with contextlib.aclosing(gen.generate_content_stream(REQUEST)) as it:
            async for resp in it:
                got.append(resp.text)
                break
        return got

    assert asyncio.run(run()) == ["a"]  # nosec B101 - assert is appropriate in unit tests
    assert stream.closed is True  # nosec B101 - assert is appropriate in unit tests
    assert stream.pulled < 3  # nosec B101 - assert is appropriate in unit tests
    assert all(c.is_closed for c in backend.clients)  # nosec B101 - assert is appropriate in unit tests
    final = find_event(log_events(capsys.readouterr().err), "stream.finalize")
    assert final["outcome"] == "abandoned"  # nosec B101 - assert is appropriate in unit tests


def test_completed_stream_closes_response_and_logs_metrics(backend, compat_config, capsys):
    stream = backend.respond_stream([sse(delta_event("Hel"), delta_event("lo"), "[DONE]")])
    collect(OpenAICompatibleContentGenerator(compat_config))
    assert stream.closed is True  # nosec B101 - assert is appropriate in unit tests
    final = find_event(log_events(capsys.readouterr().err), "stream.finalize")
    assert final["outcome"] == "completed"  # nosec B101 - assert is appropriate in unit tests
    assert final["emitted_count"] == 2  # nosec B101 - assert is appropriate in unit tests
    assert final["emitted"] is True  # nosec B101 - assert is appropriate in unit tests
    assert final["time_to_first_delta_ms"] is not None  # nosec B101 - assert is appropriate in unit tests
    assert final["total_duration_ms"] >= final["time_to_first_delta_ms"]  # nosec B101 - assert is appropriate in unit tests


def test_error_status_is_logged_and_body_parsed_as_usual(backend, compat_config, capsys):
    backend.respond_stream([b'{"error": {"message": "boom"}}\n'], status_code=500)
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == []  # nosec B101 - assert is appropriate in unit tests
    status = find_event(log_events(capsys.readouterr().err), "stream.http_status")
    assert status["error_code"] == "server_error"  # nosec B101 - assert is appropriate in unit tests


def test_transport_error_propagates(backend, compat_config, capsys):
    backend.fail_with(lambda request: httpx.ConnectError("refused", request=request))
    with pytest.raises(httpx.ConnectError):
        collect(OpenAICompatibleContentGenerator(compat_config))
    events = log_events(capsys.readouterr().err)
    assert find_event(events, "stream.error")["error_code"] == "transient"  # nosec B101 - assert is appropriate in unit tests
    assert find_event(events, "stream.finalize")["emitted_count"] == 0  # nosec B101 - assert is appropriate in unit tests


def test_interleaved_streams_keep_separate_buffers(backend, compat_config):
    def respond(request: httpx.Request) -> httpx.Response:
        tag = json.loads(request.content)["messages"][0]["content"]
        body = sse(delta_event(f"{tag}-1"), delta_event(f"{tag}-2"))
        return httpx.Response(200, stream=ChunkStream(split_bytes(body, 5)))

    backend.responder = respond
    gen = OpenAICompatibleContentGenerator(compat_config)

    async def drain(tag: str) -> List[str]:
        return [r.text async for r in gen.generate_content_stream({"contents": [text_block("user", tag)]})]

    async def run():
        return await asyncio.gather(drain("a"), drain("b"))

    assert asyncio.run(run()) == [["a-1", "a-2"], ["b-1", "b-2"]]  # nosec B101 - assert is appropriate in unit tests


def test_unrelated_event_fields_do_not_hide_deltas(backend, compat_config):
    backend.respond_stream(
        [
            sse(
                json.dumps({"id": 7, "choices": [{"delta": {"content": "hi"}}]}),
                json.dumps({"choices": [{"index": "x", "delta": {"role": 0, "content": "!"}}, {"delta": 5}]}),
                "[DONE]",
            )
        ]
    )
    assert collect(OpenAICompatibleContentGenerator(compat_config)) == ["hi", "!"]  # nosec B101 - assert is appropriate in unit tests


def test_abandonment_closes_payload_iterator_before_returning(backend, compat_config, monkeypatch):
    import contentgen_providers.openai_compat.client as client_mod

    backend.respond_stream([sse(delta_event("a")), sse(delta_event("b"))])
    real = client_mod.aiter_event_payloads
    state = {"closed": False}

    async def tracking(chunks):
        try:
            async for payload in real(chunks):
                yield payload
        finally:
            state["closed"] = True

    monkeypatch.setattr(client_mod, "aiter_event_payloads", tracking)
    gen = OpenAICompatibleContentGenerator(compat_config)

    async def run():
        async with contextlib.aclosing(gen.generate_content_stream(REQUEST)) as it:
            async for _ in it:
                break
        return state["closed"]

    assert asyncio.run(run()) is True  # nosec B101 - assert is appropriate in unit tests
