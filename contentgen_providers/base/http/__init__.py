"""HTTP utilities package for providers."""

from .client import build_async_client

__all__ = ["build_async_client"]
