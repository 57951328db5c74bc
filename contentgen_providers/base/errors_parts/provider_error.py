"""
Exception raised for faults the adapters detect themselves.

Two situations produce it: a streamed ``data:`` event that is not valid JSON
(``VALIDATION``, chained from the decode error) and a provider configuration
the factory cannot use (``VALIDATION``). Transport failures coming out of
``httpx`` are never wrapped in it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class ProviderError(Exception):
    """Adapter-detected failure carrying an :class:`ErrorCode`.

    Compared by identity like any exception, so instances stay hashable.
    ``args`` holds the message, as it does for builtin exceptions.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
