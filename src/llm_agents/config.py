"""Configuration for LLM agents.

Configuration supports both explicit instantiation and environment variable
fallback.
"""

from __future__ import annotations

import os
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from llm_agents.model_capabilities import Provider

DEFAULT_MODEL = "openai/GPT-4o-mini"

_API_KEY_ENV = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.GOOGLE: "GOOGLE_API_KEY",
}

_BASE_URL_ENV = {
    Provider.OPENAI: "OPENAI_BASE_URL",
    Provider.GOOGLE: "GOOGLE_BASE_URL",
}


class AgentConfiguration(BaseModel):
    """Configuration for an LLM agent with environment fallback.

    This configuration class supports dual-mode operation:
    1. Explicit configuration with typed fields
    2. Environment variable fallback for zero-config scenarios

    The configuration validates the model key and API key at creation time,
    so invalid configurations are caught before any request is made.

    Example:
        ```python
        # Explicit configuration
        config = AgentConfiguration(
            name="summariser",
            base_prompt="Summarise the text.",
            model="openai/GPT-4o-mini",
            api_key="sk-...",
        )

        # Zero-config (reads from environment)
        config = AgentConfiguration.from_properties({})
        ```

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(description="Agent name, sent as the request user tag")
    base_prompt: str = Field(default="", description="System prompt for every call")
    model: str = Field(description="Model key in <provider>/<model> form")
    api_key: str = Field(description="API key for the provider")
    base_url: str | None = Field(default=None, description="API base URL override")

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        """Validate that the model key names a supported provider and a model.

        Raises:
            ValueError: If the key is malformed or the provider is unknown.

        """
        provider, separator, model_name = v.partition("/")
        if not separator or not model_name:
            raise ValueError(f"Model must be in <provider>/<model> form, got: {v}")
        allowed = {p.value for p in Provider}
        if provider.lower() not in allowed:
            raise ValueError(
                f"Provider must be one of {sorted(allowed)}, got: {provider}"
            )
        return v

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is not empty.

        Raises:
            ValueError: If API key is empty or whitespace

        """
        if not v or not v.strip():
            raise ValueError("API key cannot be empty")
        return v.strip()

    @property
    def provider(self) -> Provider:
        """Return the provider named by the model key."""
        return Provider(self.model.partition("/")[0].lower())

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from properties with environment fallback.

        Layers, highest priority first:
        1. Explicit properties
        2. Environment variables
        3. Defaults

        Environment variables used:
        - LLM_AGENT_NAME: Agent name (default: "agent")
        - LLM_AGENT_BASE_PROMPT: Base prompt (default: "")
        - LLM_AGENT_MODEL: Model key (default: "openai/GPT-4o-mini")
        - OPENAI_API_KEY / GOOGLE_API_KEY: API key for the model's provider
        - OPENAI_BASE_URL / GOOGLE_BASE_URL: Base URL for the model's provider

        Args:
            properties: Configuration properties dictionary

        Returns:
            Validated configuration instance

        Raises:
            ValidationError: If configuration is invalid

        """
        config_data = properties.copy()

        if "name" not in config_data:
            config_data["name"] = os.getenv("LLM_AGENT_NAME", "agent")

        if "base_prompt" not in config_data:
            config_data["base_prompt"] = os.getenv("LLM_AGENT_BASE_PROMPT", "")

        if "model" not in config_data:
            config_data["model"] = os.getenv("LLM_AGENT_MODEL", DEFAULT_MODEL)

        # Unknown providers are left for the model validator to reject
        provider_name = str(config_data["model"]).partition("/")[0].lower()
        provider: Provider | None = None
        if provider_name in {p.value for p in Provider}:
            provider = Provider(provider_name)

        # API key (provider-specific env var)
        if "api_key" not in config_data:
            config_data["api_key"] = (
                os.getenv(_API_KEY_ENV[provider], "") if provider else ""
            )

        if "base_url" not in config_data and provider:
            base_url = os.getenv(_BASE_URL_ENV[provider])
            if base_url:
                config_data["base_url"] = base_url

        return cls.model_validate(config_data)
