"""Correlation context attached to structured log events."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Fields identifying which call a log event belongs to.

    ``extra`` entries are flattened into the top level by ``to_dict``.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        merged = {
            "provider": self.provider,
            "model": self.model,
            "request_id": self.request_id,
            "operation": self.operation,
            **self.extra,
        }
        return {k: v for k, v in merged.items() if v is not None}


__all__ = ["LogContext"]
