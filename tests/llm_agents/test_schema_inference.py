"""Tests for schema inference.

Business behaviour: Turns an example value into a JSON schema for native
structured output, and into prompt guidance for models without it.
"""

import json

from pydantic import BaseModel

from llm_agents.schema_inference import (
    STRUCTURE_INSTRUCTION,
    describe_structure,
    infer_schema,
    inject_structure,
    requires_structured_output,
)
from llm_agents.types import Message

# =============================================================================
# infer_schema
# =============================================================================


class Country(BaseModel):
    """Example pydantic model."""

    name: str
    population: int


class TestInferSchema:
    """Tests for infer_schema()."""

    def test_maps_scalars_to_json_types(self) -> None:
        assert infer_schema("text") == {"type": "string"}
        assert infer_schema(3) == {"type": "integer"}
        assert infer_schema(2.5) == {"type": "number"}
        assert infer_schema(True) == {"type": "boolean"}

    def test_unknown_values_fall_back_to_string(self) -> None:
        """None and arbitrary objects never raise and map to string."""
        assert infer_schema(None) == {"type": "string"}
        assert infer_schema(object()) == {"type": "string"}

    def test_object_keys_are_preserved_in_order(self) -> None:
        schema = infer_schema({"name": "", "capital": "", "population": 0})

        assert schema["type"] == "object"
        assert list(schema["properties"]) == ["name", "capital", "population"]
        assert schema["properties"]["population"] == {"type": "integer"}

    def test_array_items_come_from_first_element(self) -> None:
        schema = infer_schema([{"city": ""}, 42])

        assert schema == {
            "type": "array",
            "items": {"type": "object", "properties": {"city": {"type": "string"}}},
        }

    def test_empty_array_defaults_to_string_items(self) -> None:
        assert infer_schema([]) == {"type": "array", "items": {"type": "string"}}

    def test_nested_structures_mirror_example(self) -> None:
        example = {"country": {"cities": [{"name": "", "coastal": False}]}}

        schema = infer_schema(example)

        cities = schema["properties"]["country"]["properties"]["cities"]
        assert cities["type"] == "array"
        assert cities["items"]["properties"]["coastal"] == {"type": "boolean"}

    def test_pydantic_instances_are_inferred_from_their_fields(self) -> None:
        schema = infer_schema(Country(name="France", population=68))

        assert schema["properties"] == {
            "name": {"type": "string"},
            "population": {"type": "integer"},
        }


# =============================================================================
# describe_structure
# =============================================================================


class TestDescribeStructure:
    """Tests for the prompt guidance rendering."""

    def test_collapses_scalar_arrays_to_single_example(self) -> None:
        description = describe_structure({"tags": ["a", "b", "c"]})

        assert json.loads(description) == {"tags": ["example"]}

    def test_collapses_object_arrays_to_empty_object(self) -> None:
        description = describe_structure({"items": [{"id": 1}, {"id": 2}]})

        assert json.loads(description) == {"items": [{}]}

    def test_keeps_object_values(self) -> None:
        description = describe_structure({"name": "", "capital": ""})

        assert json.loads(description) == {"name": "", "capital": ""}

    def test_scalar_example_is_described_by_type_name(self) -> None:
        assert describe_structure(7) == "integer"


# =============================================================================
# inject_structure
# =============================================================================


class TestInjectStructure:
    """Tests for prompt injection of the structure instruction."""

    def test_appends_instruction_to_last_user_message(self) -> None:
        messages = [
            Message.user("first question"),
            Message.assistant("answer"),
            Message.user("tell me about France"),
        ]

        result = inject_structure(messages, {"name": "", "capital": ""})

        assert len(result) == 3
        assert result[0] == messages[0]
        assert result[1] == messages[1]
        assert result[2].role == "user"
        assert result[2].content.startswith("tell me about France\n\n")
        assert STRUCTURE_INSTRUCTION in result[2].content
        assert '"name"' in result[2].content
        assert '"capital"' in result[2].content

    def test_appends_new_user_message_when_none_exists(self) -> None:
        messages = [Message.developer("You are helpful.")]

        result = inject_structure(messages, {"answer": ""})

        assert len(result) == 2
        assert result[1].role == "user"
        assert result[1].content.startswith(STRUCTURE_INSTRUCTION)

    def test_does_not_mutate_input(self) -> None:
        original = Message.user("hello")
        messages = [original]

        inject_structure(messages, {"answer": ""})

        assert messages == [original]
        assert original.content == "hello"


class TestRequiresStructuredOutput:
    """Tests for the structured-output trigger."""

    def test_none_and_strings_do_not_request_structure(self) -> None:
        assert requires_structured_output(None) is False
        assert requires_structured_output("") is False
        assert requires_structured_output("an example answer") is False

    def test_other_values_request_structure(self) -> None:
        assert requires_structured_output({}) is True
        assert requires_structured_output([]) is True
        assert requires_structured_output(0) is True
