"""Structured output parsing with raw-text fallback."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from llm_agents.schema_inference import requires_structured_output

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedOutput:
    """Outcome of parsing one completion text.

    ``structured`` is True when ``value`` was decoded from JSON (and, for
    pydantic examples, validated into the example's model). Otherwise
    ``value`` is the raw text.
    """

    value: Any
    structured: bool


def parse_output(text: str, example: Any = None) -> ParsedOutput:
    """Parse completion text according to the requested example.

    Text results (no example, or a string example) are returned as-is.
    Structured results are decoded as JSON; when the example is a pydantic
    model instance the decoded value is validated into that model. Any
    decode or validation failure degrades to the raw text.

    Args:
        text: Raw completion text.
        example: The example value the request was made with.

    Returns:
        ParsedOutput holding either the structured value or the raw text.

    """
    if not requires_structured_output(example):
        return ParsedOutput(value=text, structured=False)

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug(f"Completion is not valid JSON, keeping raw text: {e}")
        return ParsedOutput(value=text, structured=False)

    if isinstance(example, BaseModel):
        try:
            return ParsedOutput(
                value=type(example).model_validate(decoded), structured=True
            )
        except PydanticValidationError as e:
            logger.debug(
                f"Completion does not match {type(example).__name__}, "
                f"keeping raw text: {e}"
            )
            return ParsedOutput(value=text, structured=False)

    return ParsedOutput(value=decoded, structured=True)
