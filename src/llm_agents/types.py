"""Core request and response types.

This module defines the value objects passed through the providers:
- Message: One chat-style message
- RequestOptions: Generation parameters and structured-output example
- BatchRequestOptions: RequestOptions plus batch naming and timeout
- Usage: Token accounting reported by the provider
- CompletionResult: Return type for complete() and retrieve_batch()
"""

from __future__ import annotations

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from llm_agents.model_capabilities import Provider

Role: TypeAlias = Literal["system", "developer", "user", "assistant"]


class Message(BaseModel):
    """A single message in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> Message:
        """Create a user message."""
        return cls(role="user", content=content)

    @classmethod
    def developer(cls, content: str) -> Message:
        """Create a developer (system) message."""
        return cls(role="developer", content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        """Create an assistant message."""
        return cls(role="assistant", content=content)


class RequestOptions(BaseModel):
    """Options for a single completion request.

    All fields are optional; absent values fall back to provider defaults.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Generation parameters
    temperature: float | None = None
    """Controls randomness (0-1). The wire default is 0.7."""

    top_k: int | None = None
    """Limits token selection to the top K options (Gemini only)."""

    top_p: float | None = None
    """Nucleus sampling parameter (0-1)."""

    max_tokens: int | None = None
    """Maximum number of tokens to generate."""

    frequency_penalty: float | None = None
    presence_penalty: float | None = None

    # Structured output
    example: Any = None
    """Example value describing the expected response shape.

    Structured output is requested whenever this is set to anything other
    than a plain string.
    """

    # Metadata
    agent_name: str | None = None
    """Name of the agent making the request."""

    user: str | None = None
    """End-user identifier forwarded to the provider for monitoring."""

    provider_params: dict[str, Any] = Field(default_factory=dict)
    """Provider-specific parameters (e.g. ``seed``)."""


class BatchRequestOptions(RequestOptions):
    """Options for a batch submission."""

    batch_name: str | None = None
    """Custom name, used as a correlation id prefix."""

    timeout_seconds: int | None = None
    """Requested completion window, rounded up to whole hours (1-24)."""


class Usage(BaseModel):
    """Token usage for one completion."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CompletionResult(BaseModel):
    """Result of one completion.

    ``text`` always holds the raw completion. ``data`` holds the parsed
    structured value when one was requested and could be decoded, and the
    raw text otherwise.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    text: str
    data: Any
    usage: Usage
    model: str
    """Model key in ``<provider>/<model>`` form."""

    provider: Provider

    request_id: str | None = None
    """Correlation id of the originating batch item (batch results only)."""
