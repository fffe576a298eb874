"""Tests for the model descriptor registry."""

import pytest

from llm_agents.errors import ModelNotFoundError
from llm_agents.model_capabilities import (
    GOOGLE_MODELS,
    OPENAI_MODELS,
    ModelName,
    Provider,
    find_model,
)


class TestModelRegistry:
    """Tests for the static model lists."""

    def test_gpt_4o_mini_supports_structured_output_and_batches(self) -> None:
        model = find_model(OPENAI_MODELS, "GPT-4o-mini")

        assert model.id == "gpt-4o-mini"
        assert model.capabilities.structured_output is True
        assert model.capabilities.batch_requests is True

    def test_no_gemini_model_supports_batches(self) -> None:
        assert all(not m.capabilities.batch_requests for m in GOOGLE_MODELS)

    def test_models_belong_to_their_provider(self) -> None:
        assert all(m.provider is Provider.OPENAI for m in OPENAI_MODELS)
        assert all(m.provider is Provider.GOOGLE for m in GOOGLE_MODELS)

    def test_key_combines_provider_and_display_name(self) -> None:
        model = find_model(GOOGLE_MODELS, "Gemini 2.0 Flash")

        assert model.key == "google/Gemini 2.0 Flash"


class TestFindModel:
    """Tests for model resolution."""

    def test_resolves_display_name(self) -> None:
        assert find_model(GOOGLE_MODELS, "Gemini 1.5").name is ModelName.GEMINI_15

    def test_resolves_wire_id_case_insensitively(self) -> None:
        assert find_model(OPENAI_MODELS, "GPT-4O-MINI").id == "gpt-4o-mini"
        model = find_model(GOOGLE_MODELS, "gemini-1.0-pro")
        assert model.name is ModelName.GEMINI_10_PRO

    def test_unknown_model_raises(self) -> None:
        with pytest.raises(ModelNotFoundError, match="Model not found: GPT-9"):
            find_model(OPENAI_MODELS, "GPT-9")

    def test_models_are_not_shared_across_providers(self) -> None:
        with pytest.raises(ModelNotFoundError):
            find_model(OPENAI_MODELS, "Gemini 1.5")
