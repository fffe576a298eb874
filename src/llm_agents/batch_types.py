"""Batch mode data models for provider batch APIs.

These types define the contract between the agent and batch-capable
providers (the OpenAI Batch API). They are pure value objects, immutable
after creation.
"""

from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict

from llm_agents.types import Message

BatchStatusLiteral: TypeAlias = Literal["pending", "processing", "completed", "failed"]
"""Unified batch status values."""


class BatchItem(BaseModel):
    """A single conversation submitted within a batch.

    ``id`` is an optional caller-supplied correlation id. Non-alphanumeric
    characters are stripped before use; when nothing remains, a generated
    id is used instead.
    """

    model_config = ConfigDict(frozen=True)

    messages: list[Message]
    id: str | None = None


class BatchSubmission(BaseModel):
    """Confirmation returned by the provider after submitting a batch."""

    model_config = ConfigDict(frozen=True)

    batch_id: str
    request_ids: list[str]
    """Correlation ids, one per submitted item, in submission order."""


class BatchStatus(BaseModel):
    """Polling response for a batch's processing status."""

    model_config = ConfigDict(frozen=True)

    batch_id: str
    status: BatchStatusLiteral
    output_file_id: str | None = None
    error: str | None = None
    total_count: int = 0
    completed_count: int = 0
    failed_count: int = 0
