"""
Typed views over OpenAI-compatible chat completion payloads.

Purpose
-------
Upstream servers vary in how faithfully they follow the OpenAI schema. These
models describe only the fields the adapters read, with every level optional,
so a missing ``choices`` array, an empty choice list, a ``null`` message or a
``null`` content all collapse to "no text" instead of raising.

Only ``choices[0]`` is validated, and only its ``message.content`` /
``delta.content`` is typed. Identifiers, finish reasons, roles and any
further choices are never inspected, so an odd value there cannot hide the
text of the first choice.

``parse_completion`` / ``parse_chunk`` never raise: any payload that does not
fit the expected shape (including non-object JSON) yields an empty model.
Whether a payload was valid JSON at all is the caller's concern.
"""

from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


_W = TypeVar("_W", bound=_WireModel)


def _validate_or_none(model_cls: Type[_W], data: Any) -> Optional[_W]:
    try:
        return model_cls.model_validate(data)
    except ValidationError:
        return None


class ChatMessage(_WireModel):
    """``choices[i].message`` of a non-streamed completion."""

    content: Optional[str] = None


class ChoiceDelta(_WireModel):
    """``choices[i].delta`` of a streamed chunk."""

    content: Optional[str] = None


class CompletionChoice(_WireModel):
    message: Optional[ChatMessage] = None


class ChunkChoice(_WireModel):
    delta: Optional[ChoiceDelta] = None


class ChatCompletion(_WireModel):
    """Non-streamed ``/chat/completions`` response body."""

    choices: Optional[List[Any]] = None

    def first_message_text(self) -> str:
        """Return ``choices[0].message.content`` or ``""`` at any missing level."""
        if not self.choices:
            return ""
        choice = _validate_or_none(CompletionChoice, self.choices[0])
        if choice is None or choice.message is None:
            return ""
        return choice.message.content or ""


class ChatCompletionChunk(_WireModel):
    """One ``data:`` event of a streamed ``/chat/completions`` response."""

    choices: Optional[List[Any]] = None

    def first_delta_text(self) -> str:
        """Return ``choices[0].delta.content`` or ``""`` at any missing level."""
        if not self.choices:
            return ""
        choice = _validate_or_none(ChunkChoice, self.choices[0])
        if choice is None or choice.delta is None:
            return ""
        return choice.delta.content or ""


def parse_completion(data: Any) -> ChatCompletion:
    """Validate a decoded response body; shape mismatches yield an empty model."""
    parsed = _validate_or_none(ChatCompletion, data)
    return parsed if parsed is not None else ChatCompletion()


def parse_chunk(data: Any) -> ChatCompletionChunk:
    """Validate a decoded stream event; shape mismatches yield an empty model."""
    parsed = _validate_or_none(ChatCompletionChunk, data)
    return parsed if parsed is not None else ChatCompletionChunk()


__all__ = [
    "ChatMessage",
    "ChoiceDelta",
    "CompletionChoice",
    "ChunkChoice",
    "ChatCompletion",
    "ChatCompletionChunk",
    "parse_completion",
    "parse_chunk",
]
