"""Translation between the vendor-neutral schema and the OpenAI wire format.

Pure functions only: message mapping, envelope construction, and request
shaping. Network calls live in ``client.py``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..base.models import Candidate, Content, GenerateContentResponse, Part, PromptFeedback

CHAT_COMPLETIONS_PATH = "/chat/completions"
EMBEDDINGS_PATH = "/embeddings"


def _map_role(role: Optional[str]) -> str:
    return "assistant" if role == "model" else "user"


def contents_to_messages(
    contents: Optional[Iterable[Union[Content, Mapping[str, Any]]]],
) -> List[Dict[str, str]]:
    """Flatten content blocks into OpenAI chat messages.

    Each block becomes at most one ``{"role", "content"}`` message whose
    content is the concatenation of its non-empty part texts. Blocks with
    no visible text (empty or whitespace only) are dropped. Order is kept and
    adjacent messages with the same role are not merged. Entries that are
    not content blocks are skipped.
    """
    messages: List[Dict[str, str]] = []
    for block in contents or ():
        if isinstance(block, Mapping):
            block = Content.model_validate(block)
        elif not isinstance(block, Content):
            continue
        text = block.joined_text()
        if not text.strip():
            continue
        messages.append({"role": _map_role(block.role), "content": text})
    return messages


def to_response(text: str) -> GenerateContentResponse:
    """Wrap one text fragment in a single-candidate response envelope."""
    return GenerateContentResponse(
        candidates=[
            Candidate(
                content=Content(role="model", parts=[Part(text=text)]),
                index=0,
                finish_reason="stop",
                safety_ratings=[],
            )
        ],
        prompt_feedback=PromptFeedback(safety_ratings=[]),
    )


def endpoint(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + path


def build_headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


def build_chat_payload(model: str, messages: List[Dict[str, str]], *, stream: bool = False) -> Dict[str, Any]:
    """Return the ``/chat/completions`` body; ``stream`` is only sent when true."""
    payload: Dict[str, Any] = {"model": model, "messages": messages}
    if stream:
        payload["stream"] = True
    return payload


def _is_content_block(value: Any) -> bool:
    return isinstance(value, Content) or (isinstance(value, Mapping) and "parts" in value)


def _embed_input(value: Any) -> Any:
    if isinstance(value, Content):
        return value.joined_text()
    if _is_content_block(value):
        return Content.model_validate(value).joined_text()
    return value


def build_embed_payload(model: str, content: Any) -> Dict[str, Any]:
    """Return the ``/embeddings`` body with ``content`` forwarded as ``input``.

    Content blocks (alone or as list items) are flattened to their text.
    Everything else, token-id arrays included, is passed through untouched.
    ``None`` omits ``input``.
    """
    payload: Dict[str, Any] = {"model": model}
    if content is None:
        return payload
    if isinstance(content, list):
        payload["input"] = [_embed_input(item) for item in content]
    else:
        payload["input"] = _embed_input(content)
    return payload


__all__ = [
    "CHAT_COMPLETIONS_PATH",
    "EMBEDDINGS_PATH",
    "contents_to_messages",
    "to_response",
    "endpoint",
    "build_headers",
    "build_chat_payload",
    "build_embed_payload",
]
