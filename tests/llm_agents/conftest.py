"""Shared fixtures for llm_agents tests."""

import pytest

AMBIENT_ENV_VARS = [
    "OPENAI_BASE_URL",
    "GOOGLE_BASE_URL",
    "LLM_AGENT_NAME",
    "LLM_AGENT_BASE_PROMPT",
    "LLM_AGENT_MODEL",
]


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shell settings from leaking into unit tests.

    API keys are left alone so integration tests can pick them up.
    """
    for var in AMBIENT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
