"""Construction of ``httpx.AsyncClient`` instances for the adapters.

Connection pooling, TLS and retries belong to ``httpx``. This module only
applies the shared timeout policy from :func:`get_timeout_config` so that no
adapter hard-codes numeric timeouts.

Clients are not cached: an ``AsyncClient`` is bound to the event loop it
first runs on, so adapters either receive one injected by the host or open a
short-lived one per call with ``async with``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import get_timeout_config


def build_async_client(
    base_url: Optional[str] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured with shared timeouts.

    Parameters:
        base_url: Optional base URL for relative requests.
        transport: Optional transport override (e.g. ``httpx.MockTransport``
            in tests).

    Returns:
        An unopened client; callers own its lifecycle (``async with``).
    """
    kwargs = {"timeout": get_timeout_config().to_httpx()}
    if base_url:
        kwargs["base_url"] = base_url
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)


__all__ = ["build_async_client"]
