"""Structured logging for the adapter layer.

All adapters log through children of the shared ``contentgen`` logger, which
owns a single stderr handler. Events are emitted as JSON payloads via
``log_event``; ``normalized_log_event`` additionally guarantees the canonical
keys ``structured``, ``phase``, ``attempt``, ``emitted`` and ``tokens`` (and
``error_code`` when one is known) so downstream filters can rely on them.

The level comes from ``CONTENTGEN_LOG_LEVEL`` when set.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from typing import Any, Dict, Mapping

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "contentgen"
LOG_LEVEL_ENV = "CONTENTGEN_LOG_LEVEL"

_INITIALIZED_ATTR = "_contentgen_initialized"
_STDERR_HANDLER_ATTR = "_contentgen_stderr_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Resolve a level name (``debug``, ``WARN``, ...) to its number."""
    if not value:
        return default
    name = value.strip().upper()
    level = logging.getLevelName(_LEVEL_ALIASES.get(name, name))
    return level if isinstance(level, int) else default


def _stderr_handler(json_mode: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT))
    setattr(handler, _STDERR_HANDLER_ATTR, True)
    return handler


def _is_stale(handler: logging.Handler) -> bool:
    # stderr may have been swapped since the handler was bound (pytest capture).
    stream = getattr(handler, "stream", None)
    return stream is None or stream is not sys.stderr or getattr(stream, "closed", False)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Configure the shared ``contentgen`` logger and return it.

    Safe to call repeatedly: the level is re-read from the environment and a
    handler bound to a replaced ``sys.stderr`` is swapped for a fresh one.
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    effective = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    logger.setLevel(effective)
    if not getattr(logger, _INITIALIZED_ATTR, False):
        logger.handlers[:] = []
        logger.propagate = False
        setattr(logger, _INITIALIZED_ATTR, True)

    current = [h for h in logger.handlers if getattr(h, _STDERR_HANDLER_ATTR, False)]
    for handler in current:
        if _is_stale(handler):
            logger.removeHandler(handler)
            with contextlib.suppress(Exception):
                handler.close()
        else:
            handler.setLevel(effective)
    if not any(getattr(h, _STDERR_HANDLER_ATTR, False) for h in logger.handlers):
        logger.addHandler(_stderr_handler(json_mode, effective))
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``name`` as a child of the configured ``contentgen`` logger.

    Child loggers carry no handlers of their own and propagate to the base
    logger, so each record is written exactly once.
    """
    base = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base
    child = logging.getLogger(name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit ``{"event": event, **ctx, **fields}`` as one JSON message.

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event, **(ctx.to_dict() if ctx else {})}
    for key, value in fields.items():
        if keep_none or value is not None:
            payload[key] = value
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("structured", "phase", "attempt", "error_code", "emitted", "tokens")


def _coerce_tokens(tokens: Any) -> Any:
    if tokens is None or isinstance(tokens, dict):
        return tokens
    if isinstance(tokens, Mapping):
        return dict(tokens)
    return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit an event that always carries the normalized key set.

    ``error_code`` is omitted when ``None``; every other required key is kept
    even when its value is unknown. ``extra_fields`` only fill keys that are
    still unset.
    """
    fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is not None and fields.get(key) is None:
            fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "get_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
