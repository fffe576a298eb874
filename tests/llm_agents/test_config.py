"""Tests for AgentConfiguration.

Business behaviour: Validates agent settings up front, with environment
variable fallback for zero-config use.
"""

import pytest
from pydantic import ValidationError

from llm_agents.config import DEFAULT_MODEL, AgentConfiguration
from llm_agents.model_capabilities import Provider

# =============================================================================
# Explicit configuration
# =============================================================================


class TestAgentConfigurationValidation:
    """Tests for field validation."""

    def test_valid_configuration(self) -> None:
        config = AgentConfiguration(
            name="geographer",
            base_prompt="Answer geography questions.",
            model="google/Gemini 1.5",
            api_key="  key-123  ",
        )

        assert config.provider is Provider.GOOGLE
        assert config.api_key == "key-123"
        assert config.base_url is None

    def test_model_must_name_provider_and_model(self) -> None:
        with pytest.raises(ValidationError, match="<provider>/<model>"):
            AgentConfiguration(name="a", model="GPT-4o-mini", api_key="k")

    def test_unknown_provider_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Provider must be one of"):
            AgentConfiguration(name="a", model="anthropic/claude", api_key="k")

    def test_blank_api_key_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="API key cannot be empty"):
            AgentConfiguration(name="a", model=DEFAULT_MODEL, api_key="   ")

    def test_unknown_fields_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AgentConfiguration(
                name="a",
                model=DEFAULT_MODEL,
                api_key="k",
                temperature=0.3,  # type: ignore[call-arg]
            )

    def test_configuration_is_immutable(self) -> None:
        config = AgentConfiguration(name="a", model=DEFAULT_MODEL, api_key="k")

        with pytest.raises(ValidationError):
            config.name = "b"  # type: ignore[misc]


# =============================================================================
# Environment fallback
# =============================================================================


class TestAgentConfigurationFromProperties:
    """Tests for from_properties() with environment fallback."""

    def test_zero_config_uses_defaults_and_provider_key(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "env-openai-key")

        config = AgentConfiguration.from_properties({})

        assert config.name == "agent"
        assert config.base_prompt == ""
        assert config.model == DEFAULT_MODEL
        assert config.api_key == "env-openai-key"

    def test_environment_selects_model_and_provider_settings(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LLM_AGENT_NAME", "env-agent")
        monkeypatch.setenv("LLM_AGENT_BASE_PROMPT", "Be brief.")
        monkeypatch.setenv("LLM_AGENT_MODEL", "google/Gemini 2.0 Flash")
        monkeypatch.setenv("GOOGLE_API_KEY", "env-google-key")
        monkeypatch.setenv("GOOGLE_BASE_URL", "http://gateway/v1")

        config = AgentConfiguration.from_properties({})

        assert config.name == "env-agent"
        assert config.base_prompt == "Be brief."
        assert config.provider is Provider.GOOGLE
        assert config.api_key == "env-google-key"
        assert config.base_url == "http://gateway/v1"

    def test_properties_override_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LLM_AGENT_MODEL", "google/Gemini 1.5")
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")

        config = AgentConfiguration.from_properties(
            {"name": "explicit", "model": "openai/GPT-4", "api_key": "prop-key"}
        )

        assert config.name == "explicit"
        assert config.model == "openai/GPT-4"
        assert config.api_key == "prop-key"

    def test_missing_api_key_is_rejected(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ValidationError, match="API key cannot be empty"):
            AgentConfiguration.from_properties({"name": "a"})

    def test_unknown_provider_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Provider must be one of"):
            AgentConfiguration.from_properties({"model": "mistral/large"})

    def test_properties_are_not_mutated(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")
        properties = {"name": "a"}

        AgentConfiguration.from_properties(properties)

        assert properties == {"name": "a"}
