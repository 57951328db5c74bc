"""
Vendor-neutral content generation schema.

Purpose
-------
Pydantic models for the request and response shapes exchanged with the host
application: role-tagged content blocks in, single-candidate response
envelopes out. Field names follow Python conventions; the wire shape uses
camelCase aliases (``finishReason``, ``safetyRatings``, ``promptFeedback``,
``totalTokens``) so ``model_dump(by_alias=True)`` yields the exact envelope
hosts expect.

Validation policy
-----------------
Inputs are read leniently: unknown keys are ignored, parts without usable
text are kept as empty parts, non-part entries in ``parts`` are dropped, and
a non-list ``parts`` or non-string ``role`` reads as absent.
Hosts may pass plain dicts anywhere a model is expected.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _SchemaModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class Part(_SchemaModel):
    """One piece of a content block. Only ``text`` is interpreted."""

    text: Optional[str] = None

    @field_validator("text", mode="before")
    @classmethod
    def _non_string_text_is_absent(cls, value: Any) -> Any:
        return _str_or_none(value)


class Content(_SchemaModel):
    """A role-tagged content block (``role="model"`` for model turns)."""

    role: Optional[str] = None
    parts: Optional[List[Part]] = None

    @field_validator("role", mode="before")
    @classmethod
    def _non_string_role_is_absent(cls, value: Any) -> Any:
        return _str_or_none(value)

    @field_validator("parts", mode="before")
    @classmethod
    def _drop_non_parts(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [p for p in value if isinstance(p, (dict, Part))]

    def joined_text(self) -> str:
        """Concatenate every non-empty part text in order."""
        return "".join(p.text for p in (self.parts or []) if p.text)


class GenerateContentParameters(_SchemaModel):
    """Request for ``generate_content`` / ``generate_content_stream``.

    ``model`` is accepted for interface parity; the adapter always uses its
    configured model.
    """

    model: Optional[str] = None
    contents: Optional[List[Content]] = None
    config: Optional[Dict[str, Any]] = None

    @field_validator("model", mode="before")
    @classmethod
    def _non_string_model_is_absent(cls, value: Any) -> Any:
        return _str_or_none(value)

    @field_validator("config", mode="before")
    @classmethod
    def _non_mapping_config_is_absent(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @field_validator("contents", mode="before")
    @classmethod
    def _drop_non_blocks(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [c for c in value if isinstance(c, (dict, Content))]


class Candidate(_SchemaModel):
    content: Content
    index: int = 0
    finish_reason: str = Field(default="stop", alias="finishReason")
    safety_ratings: List[Dict[str, Any]] = Field(default_factory=list, alias="safetyRatings")


class PromptFeedback(_SchemaModel):
    safety_ratings: List[Dict[str, Any]] = Field(default_factory=list, alias="safetyRatings")


class GenerateContentResponse(_SchemaModel):
    """Response envelope; adapters always emit exactly one candidate."""

    candidates: List[Candidate]
    prompt_feedback: PromptFeedback = Field(default_factory=PromptFeedback, alias="promptFeedback")

    @property
    def text(self) -> str:
        """Text of the first candidate's parts, or ``""`` when absent."""
        if not self.candidates:
            return ""
        return "".join(p.text or "" for p in (self.candidates[0].content.parts or []))

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase wire shape."""
        return self.model_dump(by_alias=True)


class CountTokensParameters(_SchemaModel):
    model: Optional[str] = None
    contents: Optional[List[Content]] = None


class CountTokensResponse(_SchemaModel):
    total_tokens: int = Field(default=0, alias="totalTokens")


class EmbedContentParameters(_SchemaModel):
    """Request for ``embed_content``.

    ``content`` is not validated: strings, string lists, token-id arrays and
    anything else the backend accepts are forwarded as the OpenAI ``input``
    field. Content blocks are flattened to their joined text on the way out.
    """

    content: Any = None
    model: Optional[str] = None

    @field_validator("model", mode="before")
    @classmethod
    def _non_string_model_is_absent(cls, value: Any) -> Any:
        return _str_or_none(value)


__all__ = [
    "Part",
    "Content",
    "GenerateContentParameters",
    "Candidate",
    "PromptFeedback",
    "GenerateContentResponse",
    "CountTokensParameters",
    "CountTokensResponse",
    "EmbedContentParameters",
]
