"""Provider factory."""

from __future__ import annotations

from llm_agents.errors import UnsupportedProviderError
from llm_agents.model_capabilities import Provider
from llm_agents.providers.base import BaseProvider
from llm_agents.providers.google import GoogleProvider
from llm_agents.providers.openai import OpenAIProvider
from llm_agents.transport import Transport


def split_model_key(model_key: str) -> tuple[Provider, str]:
    """Split a ``<provider>/<model>`` key into its provider and model name.

    Only the first ``/`` separates the two, so model names may contain
    slashes.

    Raises:
        UnsupportedProviderError: If the provider segment is not recognised.

    """
    provider_name, _, model_name = model_key.partition("/")
    try:
        provider = Provider(provider_name.lower())
    except ValueError as e:
        raise UnsupportedProviderError(provider_name) from e
    return provider, model_name


class ProviderFactory:
    """Factory for creating provider adapters."""

    @staticmethod
    def create_provider(
        provider: Provider | str,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: Transport | None = None,
    ) -> BaseProvider:
        """Create the adapter for ``provider``.

        Args:
            provider: Provider enum member or name ("openai", "google").
            api_key: Optional API key (provider-specific env var if not provided).
            base_url: Optional API base URL.
            transport: Optional HTTP transport.

        Returns:
            Configured provider adapter.

        Raises:
            UnsupportedProviderError: If the provider is not supported.
            LLMConfigurationError: If no API key is available.

        """
        try:
            resolved = Provider(str(provider).lower())
        except ValueError as e:
            raise UnsupportedProviderError(str(provider)) from e

        if resolved is Provider.OPENAI:
            return OpenAIProvider(
                api_key=api_key, base_url=base_url, transport=transport
            )
        return GoogleProvider(api_key=api_key, base_url=base_url, transport=transport)
