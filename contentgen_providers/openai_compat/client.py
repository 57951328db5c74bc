"""OpenAI-compatible content generator.

Purpose:
    Implements the vendor-neutral ``ContentGenerator`` contract on top of any
    server exposing the OpenAI ``/chat/completions`` and ``/embeddings``
    endpoints (OpenAI, OpenRouter, Ollama, vLLM, LM Studio, ...).

External dependencies:
    - ``httpx`` for async HTTP. A host-supplied ``httpx.AsyncClient`` is used
      as-is and never closed here; otherwise every call opens and closes its
      own client built by ``build_async_client``.

Failure semantics:
    - Transport faults and non-JSON batch/embedding bodies propagate
      unchanged after an ``*.error`` log event.
    - A parseable batch body without usable ``choices`` yields an empty-text
      envelope. Non-2xx statuses are logged, not raised.
    - A stream whose response carries no body yields nothing.
    - A corrupt ``data:`` event raises ``ProviderError(VALIDATION)`` from the
      stream iterator, unless the generator was built with
      ``strict_events=False``, in which case the event is logged and skipped.

Timeout strategy:
    None enforced here; deadlines belong to the ``httpx`` client.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel

from ..base.errors import ErrorCode, ProviderError, classify_exception, classify_status
from ..base.http import build_async_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.dto import parse_chunk, parse_completion
from ..base.models import (
    CountTokensParameters,
    CountTokensResponse,
    EmbedContentParameters,
    GenerateContentParameters,
    GenerateContentResponse,
)
from ..base.streaming import StreamMetrics, aiter_event_payloads
from .helpers import (
    CHAT_COMPLETIONS_PATH,
    EMBEDDINGS_PATH,
    build_chat_payload,
    build_embed_payload,
    build_headers,
    contents_to_messages,
    endpoint,
    to_response,
)
from .provider_init import OpenAICompatConfig

_M = TypeVar("_M", bound=BaseModel)

# Statuses that by definition carry no response body.
_NO_BODY_STATUSES = frozenset((204, 304))


def _coerce(model_cls: Type[_M], request: Union[_M, Mapping[str, Any], None]) -> _M:
    if isinstance(request, model_cls):
        return request
    return model_cls.model_validate(request or {})


class OpenAICompatibleContentGenerator:
    """``ContentGenerator`` backed by an OpenAI-compatible HTTP API."""

    def __init__(
        self,
        config: OpenAICompatConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
        strict_events: bool = True,
        provider_name: str = "openai_compat",
    ) -> None:
        """Create a generator.

        Parameters:
            config: Immutable credential / base URL / model triple.
            client: Optional shared ``httpx.AsyncClient`` owned by the host.
            strict_events: When True (default) a streamed event that is not
                valid JSON aborts the stream; when False it is skipped.
            provider_name: Label used in logs and errors.
        """
        self._config = config
        self._client = client
        self._strict_events = strict_events
        self._provider_name = provider_name
        self._logger = get_logger(f"contentgen.{provider_name}")

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def config(self) -> OpenAICompatConfig:
        return self._config

    # ----- Batch -----

    async def generate_content(
        self, request: Union[GenerateContentParameters, Mapping[str, Any]]
    ) -> GenerateContentResponse:
        """Run one non-streamed chat completion and wrap its text."""
        request = _coerce(GenerateContentParameters, request)
        messages = contents_to_messages(request.contents)
        ctx = self._ctx("generate_content")
        normalized_log_event(self._logger, "chat.start", ctx, phase="start", messages=len(messages))
        t0 = time.perf_counter()
        try:
            async with self._http() as client:
                resp = await client.post(
                    endpoint(self._config.base_url, CHAT_COMPLETIONS_PATH),
                    headers=build_headers(self._config.api_key),
                    json=build_chat_payload(self._config.model, messages),
                )
                data = resp.json()
        except Exception as exc:
            self._log_failure("chat.error", ctx, exc)
            raise
        self._log_http_status("chat.http_status", ctx, resp)
        text = parse_completion(data).first_message_text()
        normalized_log_event(
            self._logger,
            "chat.finalize",
            ctx,
            phase="finalize",
            emitted=bool(text),
            http_status=resp.status_code,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 3),
        )
        return to_response(text)

    # ----- Streaming -----

    async def generate_content_stream(
        self, request: Union[GenerateContentParameters, Mapping[str, Any]]
    ) -> AsyncIterator[GenerateContentResponse]:
        """Stream a chat completion, yielding one envelope per text delta.

        The returned async generator is single-use. Closing it early (``break``
        inside ``contextlib.aclosing`` or an explicit ``aclose()``) releases the
        HTTP response immediately.
        """
        request = _coerce(GenerateContentParameters, request)
        messages = contents_to_messages(request.contents)
        ctx = self._ctx("generate_content_stream")
        metrics = StreamMetrics()
        outcome = "abandoned"
        normalized_log_event(self._logger, "stream.start", ctx, phase="start", messages=len(messages))
        try:
            async with self._http() as client:
                async with client.stream(
                    "POST",
                    endpoint(self._config.base_url, CHAT_COMPLETIONS_PATH),
                    headers=build_headers(self._config.api_key),
                    json=build_chat_payload(self._config.model, messages, stream=True),
                ) as resp:
                    self._log_http_status("stream.http_status", ctx, resp)
                    if resp.status_code in _NO_BODY_STATUSES:
                        outcome = "no_body"
                        normalized_log_event(
                            self._logger, "stream.no_body", ctx, phase="stream", http_status=resp.status_code
                        )
                        return
                    async with aclosing(aiter_event_payloads(resp.aiter_bytes())) as payloads:
                        async for payload in payloads:
                            text = self._delta_text(payload, ctx)
                            if text:
                                metrics.record_emit()
                                yield to_response(text)
            outcome = "completed"
        except Exception as exc:
            outcome = "error"
            self._log_failure("stream.error", ctx, exc, emitted=metrics.emitted > 0)
            raise
        finally:
            metrics.finish()
            normalized_log_event(
                self._logger,
                "stream.finalize",
                ctx,
                phase="finalize",
                emitted=metrics.emitted > 0,
                outcome=outcome,
                emitted_count=metrics.emitted,
                time_to_first_delta_ms=metrics.time_to_first_delta_ms,
                total_duration_ms=metrics.total_duration_ms,
            )

    def _delta_text(self, payload: str, ctx: LogContext) -> str:
        """Decode one ``data:`` payload into its delta text (``""`` when none)."""
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            if self._strict_events:
                raise ProviderError(
                    code=ErrorCode.VALIDATION,
                    message=f"malformed stream event: {exc.msg}",
                    provider=self._provider_name,
                    model=self._config.model,
                    raw=exc,
                ) from exc
            normalized_log_event(
                self._logger,
                "stream.event_skipped",
                ctx,
                phase="stream",
                error_code=ErrorCode.VALIDATION.value,
                level=logging.WARNING,
                payload_preview=payload[:200],
            )
            return ""
        return parse_chunk(data).first_delta_text()

    # ----- Token count / embeddings -----

    async def count_tokens(
        self, request: Union[CountTokensParameters, Mapping[str, Any], None] = None
    ) -> CountTokensResponse:
        """Placeholder count: always ``totalTokens == 0``, no network call."""
        return CountTokensResponse(total_tokens=0)

    async def embed_content(self, request: Union[EmbedContentParameters, Mapping[str, Any]]) -> Any:
        """POST ``content`` to ``/embeddings`` and return the decoded body verbatim."""
        request = _coerce(EmbedContentParameters, request)
        ctx = self._ctx("embed_content")
        normalized_log_event(self._logger, "embed.start", ctx, phase="start")
        try:
            async with self._http() as client:
                resp = await client.post(
                    endpoint(self._config.base_url, EMBEDDINGS_PATH),
                    headers=build_headers(self._config.api_key),
                    json=build_embed_payload(self._config.model, request.content),
                )
                data = resp.json()
        except Exception as exc:
            self._log_failure("embed.error", ctx, exc)
            raise
        self._log_http_status("embed.http_status", ctx, resp)
        normalized_log_event(
            self._logger, "embed.finalize", ctx, phase="finalize", emitted=True, http_status=resp.status_code
        )
        return data

    # ----- helpers -----

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with build_async_client() as client:
            yield client

    def _ctx(self, operation: str) -> LogContext:
        return LogContext(provider=self._provider_name, model=self._config.model, operation=operation)

    def _log_http_status(self, event: str, ctx: LogContext, resp: httpx.Response) -> None:
        if resp.status_code < 400:
            return
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase="response",
            error_code=classify_status(resp.status_code).value,
            level=logging.WARNING,
            http_status=resp.status_code,
        )

    def _log_failure(self, event: str, ctx: LogContext, exc: Exception, *, emitted: Optional[bool] = None) -> None:
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase="finalize",
            error_code=classify_exception(exc).value,
            emitted=emitted,
            level=logging.ERROR,
            error=str(exc),
            error_type=type(exc).__name__,
        )


__all__ = ["OpenAICompatibleContentGenerator"]
