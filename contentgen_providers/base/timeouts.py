"""Timeout values handed to the HTTP transport.

The adapters themselves never enforce deadlines; they only configure the
``httpx`` clients they create. Values are read from the environment once and
cached; a changed environment refreshes the cache on the next call.

Environment variables (seconds, all optional, non-positive values ignored):
    CONTENTGEN_TIMEOUT_CONNECT_SECONDS
    CONTENTGEN_TIMEOUT_HTTP_SECONDS
    CONTENTGEN_TIMEOUT_STREAM_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

_ENV_NAMES = (
    "CONTENTGEN_TIMEOUT_CONNECT_SECONDS",
    "CONTENTGEN_TIMEOUT_HTTP_SECONDS",
    "CONTENTGEN_TIMEOUT_STREAM_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        http_timeout_seconds: Write and pool acquisition for any request.
        stream_timeout_seconds: Idle read gap while waiting for the next
            bytes of a (possibly streamed) response body.
    """

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 120.0

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.http_timeout_seconds,
            connect=self.connect_timeout_seconds,
            read=self.stream_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.http_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.stream_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
