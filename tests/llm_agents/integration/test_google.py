"""Integration tests for Gemini agents.

These tests make real API calls to the Generative Language API.

Run with: pytest -m integration
"""

import pytest

from llm_agents import Message, create_agent

GEO_PROMPT = "You answer geography questions in JSON with the name and capital."
EXAMPLE = {"name": "", "capital": ""}


@pytest.mark.integration
class TestGoogleIntegration:
    """End-to-end tests for Gemini completions."""

    async def test_native_response_schema(self, require_google_api_key: str) -> None:
        agent = create_agent(
            name="geographer",
            base_prompt=GEO_PROMPT,
            model="google/Gemini 2.0 Flash",
            api_key=require_google_api_key,
            example=EXAMPLE,
        )

        result = await agent.complete([Message.user("Tell me about France")])

        assert isinstance(result.data, dict)
        assert "paris" in str(result.data.get("capital", "")).lower()

    async def test_text_completion(self, require_google_api_key: str) -> None:
        agent = create_agent(
            name="geographer",
            base_prompt="Answer in one word.",
            model="google/Gemini 1.5",
            api_key=require_google_api_key,
        )

        result = await agent.complete([Message.user("What is the capital of Italy?")])

        assert "rome" in result.text.lower()
