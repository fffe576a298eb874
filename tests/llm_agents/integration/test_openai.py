"""Integration tests for OpenAI agents.

These tests make real API calls to OpenAI.

Run with: pytest -m integration
"""

import asyncio

import pytest

from llm_agents import BatchNotReadyError, Message, create_agent

GEO_PROMPT = "You answer geography questions in JSON with the name and capital."
EXAMPLE = {"name": "", "capital": ""}

POLL_INTERVAL_SECONDS = 10
POLL_TIMEOUT_SECONDS = 600


@pytest.mark.integration
class TestOpenAIIntegration:
    """End-to-end tests for single completions."""

    async def test_structured_completion(self, require_openai_api_key: str) -> None:
        agent = create_agent(
            name="geographer",
            base_prompt=GEO_PROMPT,
            model="openai/GPT-4o-mini",
            api_key=require_openai_api_key,
            example=EXAMPLE,
        )

        result = await agent.complete([Message.user("Tell me about France")])

        assert isinstance(result.data, dict)
        assert "paris" in str(result.data.get("capital", "")).lower()
        assert result.usage.total_tokens > 0


@pytest.mark.integration
@pytest.mark.batch
class TestOpenAIBatchIntegration:
    """End-to-end batch lifecycle; may take several minutes."""

    async def test_submit_poll_and_retrieve(self, require_openai_api_key: str) -> None:
        agent = create_agent(
            name="geographer",
            base_prompt=GEO_PROMPT,
            model="openai/GPT-4o-mini",
            api_key=require_openai_api_key,
            example=EXAMPLE,
        )

        submission = await agent.create_batch(
            [
                [Message.user("Tell me about France")],
                [Message.user("Tell me about Spain")],
            ]
        )
        assert len(submission.request_ids) == 2

        with pytest.raises(BatchNotReadyError):
            await agent.retrieve_batch(submission.batch_id)

        status = await agent.check_batch(submission.batch_id)
        elapsed = 0
        while status.status in ("pending", "processing"):
            await asyncio.sleep(POLL_INTERVAL_SECONDS)
            elapsed += POLL_INTERVAL_SECONDS
            if elapsed >= POLL_TIMEOUT_SECONDS:
                await agent.cancel_batch(submission.batch_id)
                pytest.skip("Batch did not complete within the polling timeout")
            status = await agent.check_batch(submission.batch_id)

        assert status.status == "completed"

        results = await agent.retrieve_batch(submission.batch_id)

        assert {r.request_id for r in results} == set(submission.request_ids)
        assert all(isinstance(r.data, dict) for r in results)
