"""Internal schema utilities for LLM providers.

Transforms the JSON schemas produced by ``llm_agents.schema_inference``
into provider-specific dialects.
"""

from typing import Any

# Metadata Gemini's response_schema does not accept.
_GEMINI_STRIP_FIELDS = frozenset({"title", "default", "$schema", "$defs"})


def convert_to_gemini_schema(
    schema: dict[str, Any],
    _defs: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Convert a JSON schema into Gemini's ``response_schema`` format.

    Gemini uses an OpenAPI 3.0-style dialect:

    1. Type names are capitalised (``STRING``, ``OBJECT``, ``ARRAY``, etc.)
    2. ``title``, ``default`` and ``$schema`` are not accepted
    3. ``$ref`` is not supported, so local ``#/$defs/...`` references are
       inlined and the ``$defs`` block is dropped

    Operates recursively through ``properties``, ``items`` and ``anyOf``.
    Returns a new dict; the original is not mutated.

    Args:
        schema: JSON schema dictionary.
        _defs: Definitions of the root schema (internal, set on recursion).

    Returns:
        New schema dictionary in Gemini's expected format.

    """
    if _defs is None:
        _defs = schema.get("$defs", {})

    ref = schema.get("$ref")
    if isinstance(ref, str):
        definition = _defs.get(ref.rsplit("/", 1)[-1])
        if isinstance(definition, dict):
            return convert_to_gemini_schema(definition, _defs)

    result: dict[str, Any] = {}

    for key, value in schema.items():
        if key in _GEMINI_STRIP_FIELDS:
            continue

        match key:
            case "type":
                result["type"] = value.upper() if isinstance(value, str) else value
            case "properties":
                result["properties"] = {
                    name: convert_to_gemini_schema(sub_schema, _defs)
                    for name, sub_schema in value.items()
                }
            case "items" if isinstance(value, dict):
                result["items"] = convert_to_gemini_schema(value, _defs)  # type: ignore[arg-type]
            case "anyOf" if isinstance(value, list):
                result["anyOf"] = [
                    convert_to_gemini_schema(variant, _defs)
                    if isinstance(variant, dict)
                    else variant
                    for variant in value
                ]
            case _:
                result[key] = value

    return result
