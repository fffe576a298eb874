"""Shared fixtures for provider integration tests.

These tests require real API keys and make actual API calls.
Run with: pytest -m integration
"""

import os

import pytest


@pytest.fixture
def require_openai_api_key() -> str:
    """Skip test if OPENAI_API_KEY is not set, otherwise return the key."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        pytest.skip("OPENAI_API_KEY not set")
    return api_key


@pytest.fixture
def require_google_api_key() -> str:
    """Skip test if GOOGLE_API_KEY is not set, otherwise return the key."""
    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        pytest.skip("GOOGLE_API_KEY not set")
    return api_key
