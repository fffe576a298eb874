"""Tests for the exception hierarchy."""

import pytest

from llm_agents.errors import (
    BatchNotReadyError,
    CapabilityUnsupportedError,
    LLMAgentError,
    LLMConfigurationError,
    ModelNotFoundError,
    RequestValidationError,
    UnsupportedProviderError,
    UpstreamError,
)


class TestErrorHierarchy:
    """Every library error can be caught as LLMAgentError."""

    @pytest.mark.parametrize(
        "error",
        [
            LLMConfigurationError("bad config"),
            UnsupportedProviderError("anthropic"),
            ModelNotFoundError("GPT-9"),
            RequestValidationError("empty"),
            CapabilityUnsupportedError("no batch", model_name="Gemini 1.5"),
            UpstreamError("OpenAI API error", status_code=500, payload={}),
            BatchNotReadyError("batch_1", "processing"),
        ],
    )
    def test_is_llm_agent_error(self, error: LLMAgentError) -> None:
        assert isinstance(error, LLMAgentError)

    def test_unsupported_provider_is_configuration_error(self) -> None:
        error = UnsupportedProviderError("anthropic")

        assert isinstance(error, LLMConfigurationError)
        assert error.provider == "anthropic"
        assert str(error) == "Unsupported provider: anthropic"


class TestErrorMessages:
    """Error messages carry the context callers need."""

    def test_model_not_found(self) -> None:
        error = ModelNotFoundError("GPT-9")

        assert error.model_name == "GPT-9"
        assert str(error) == "Model not found: GPT-9"

    def test_upstream_error_keeps_payload_verbatim(self) -> None:
        payload = {"error": {"message": "Invalid API key", "code": "invalid_api_key"}}

        error = UpstreamError("OpenAI API error", status_code=401, payload=payload)

        assert error.status_code == 401
        assert error.payload is payload
        assert str(error).startswith("OpenAI API error: ")
        assert "Invalid API key" in str(error)

    def test_upstream_error_with_text_payload(self) -> None:
        error = UpstreamError(
            "Google API error", status_code=502, payload="Bad Gateway"
        )

        assert str(error) == "Google API error: Bad Gateway"

    def test_batch_not_ready(self) -> None:
        error = BatchNotReadyError("batch_1", "processing")

        assert error.batch_id == "batch_1"
        assert error.status == "processing"
        assert str(error) == "Batch batch_1 is not completed yet (status: processing)"

    def test_capability_unsupported_keeps_model_name(self) -> None:
        error = CapabilityUnsupportedError("no batch", model_name="Gemini 1.5")

        assert error.model_name == "Gemini 1.5"
        assert str(error) == "no batch"
