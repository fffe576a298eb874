"""Schema inference from example values.

An example value describes the shape the caller expects back from the
model. This module turns it into:

- a JSON schema (``infer_schema``), which providers with native structured
  output convert to their own dialect, and
- a compact textual description (``describe_structure``), which is injected
  into the prompt for models without native support.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from llm_agents.types import Message

STRUCTURE_INSTRUCTION = "Please provide the response in the following JSON structure:"


def requires_structured_output(example: Any) -> bool:
    """Return True when ``example`` asks for a structured (non-text) result."""
    return example is not None and not isinstance(example, str)


def _normalise(example: Any) -> Any:
    if isinstance(example, BaseModel):
        return example.model_dump(mode="json")
    return example


def _scalar_type(value: Any) -> str:
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    return "string"


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def infer_schema(example: Any) -> dict[str, Any]:
    """Infer a JSON schema from an example value.

    Mappings become objects with one property per key (in key order),
    sequences become arrays typed by their first element, and scalars map
    to their JSON type. Empty sequences default to arrays of strings and
    unrecognised values default to strings, so this never raises.

    Args:
        example: Any example value, including pydantic model instances.

    Returns:
        JSON schema dictionary using lower-case type names.

    """
    value = _normalise(example)

    if isinstance(value, Mapping):
        return {
            "type": "object",
            "properties": {
                str(key): infer_schema(item)
                for key, item in value.items()  # type: ignore[reportUnknownVariableType]
            },
        }

    if _is_array(value):
        if len(value) == 0:
            return {"type": "array", "items": {"type": "string"}}
        return {"type": "array", "items": infer_schema(value[0])}

    return {"type": _scalar_type(value)}


def _collapse_arrays(value: Any) -> Any:
    """Replace every non-empty array with a single representative element."""
    if isinstance(value, Mapping):
        return {
            key: _collapse_arrays(item)
            for key, item in value.items()  # type: ignore[reportUnknownVariableType]
        }
    if _is_array(value):
        if len(value) == 0:
            return []
        first = value[0]
        if isinstance(first, Mapping) or _is_array(first):
            return [{}]
        return ["example"]
    return value


def describe_structure(example: Any) -> str:
    """Render an example value as compact JSON guidance for a prompt.

    Arrays are collapsed to one element (``"example"`` for scalars, ``{}``
    for nested structures) to keep the guidance short. Scalar examples are
    described by their JSON type name.
    """
    value = _normalise(example)
    if isinstance(value, Mapping) or _is_array(value):
        return json.dumps(_collapse_arrays(value), indent=2, default=str)
    return _scalar_type(value)


def inject_structure(messages: Sequence[Message], example: Any) -> list[Message]:
    """Return a copy of ``messages`` carrying the structure instruction.

    The instruction is appended to the last user message. When there is no
    user message, a new user message with only the instruction is appended.
    The input sequence and its messages are left untouched.
    """
    instruction = f"{STRUCTURE_INSTRUCTION} {describe_structure(example)}"
    enhanced = list(messages)

    for index in range(len(enhanced) - 1, -1, -1):
        message = enhanced[index]
        if message.role == "user":
            enhanced[index] = message.model_copy(
                update={"content": f"{message.content}\n\n{instruction}"}
            )
            return enhanced

    enhanced.append(Message(role="user", content=instruction))
    return enhanced
