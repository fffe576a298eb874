"""LLM Providers.

This package contains the provider protocols and concrete implementations
for the supported LLM providers (OpenAI, Google).
"""

from llm_agents.providers.base import BaseProvider
from llm_agents.providers.google import GoogleProvider
from llm_agents.providers.openai import OpenAIProvider
from llm_agents.providers.protocol import BatchLLMProvider, LLMProvider

__all__ = [
    "LLMProvider",
    "BatchLLMProvider",
    "BaseProvider",
    "OpenAIProvider",
    "GoogleProvider",
]
