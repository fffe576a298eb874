"""Message formatting between the abstract message list and provider wire shapes."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from llm_agents.types import Message, Usage


def to_openai_messages(messages: Sequence[Message]) -> list[dict[str, str]]:
    """Format messages for the OpenAI chat completions API."""
    return [{"role": message.role, "content": message.content} for message in messages]


def to_gemini_contents(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """Format messages as Gemini ``contents``.

    Gemini only knows ``user`` and ``model`` turns: assistant messages map
    to ``model`` and every other role is sent as ``user``.
    """
    return [
        {
            "role": "model" if message.role == "assistant" else "user",
            "parts": [{"text": message.content}],
        }
        for message in messages
    ]


def extract_openai_text(body: dict[str, Any]) -> str:
    """Return the first choice's message content from a chat completion.

    Raises:
        KeyError, IndexError, TypeError: If the body has no choices.

    """
    content = body["choices"][0]["message"]["content"]
    return content if isinstance(content, str) else ""


def extract_gemini_text(body: dict[str, Any]) -> str:
    """Return the text of the first candidate of a ``generateContent`` response.

    Multiple text parts are concatenated.

    Raises:
        KeyError, IndexError, TypeError: If the body has no candidates.

    """
    parts = body["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)


def _token_count(usage: Any, key: str) -> int:
    if not isinstance(usage, dict):
        return 0
    value = usage.get(key)
    # Counts that are missing, null or not integers are reported as 0
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def extract_openai_usage(body: dict[str, Any]) -> Usage:
    """Map OpenAI ``usage`` fields into a Usage record."""
    usage = body.get("usage")
    return Usage(
        prompt_tokens=_token_count(usage, "prompt_tokens"),
        completion_tokens=_token_count(usage, "completion_tokens"),
        total_tokens=_token_count(usage, "total_tokens"),
    )


def extract_gemini_usage(body: dict[str, Any]) -> Usage:
    """Map Gemini ``usageMetadata`` fields into a Usage record."""
    usage = body.get("usageMetadata")
    return Usage(
        prompt_tokens=_token_count(usage, "promptTokenCount"),
        completion_tokens=_token_count(usage, "candidatesTokenCount"),
        total_tokens=_token_count(usage, "totalTokenCount"),
    )
