"""LLM provider protocols.

Defines the contracts that LLM providers must satisfy:

- ``LLMProvider``: model listing and single completions (all providers)
- ``BatchLLMProvider``: asynchronous batch API operations

Every provider in this package implements both protocols. Whether a batch
operation is actually available is a per-model capability
(``ModelCapabilities.batch_requests``), checked as a precondition of each
batch call; models without it raise ``CapabilityUnsupportedError`` before
any network call.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from llm_agents.batch_types import BatchItem, BatchStatus, BatchSubmission
from llm_agents.model_capabilities import ModelDescriptor, Provider
from llm_agents.types import (
    BatchRequestOptions,
    CompletionResult,
    Message,
    RequestOptions,
)


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for LLM providers.

    The protocol is runtime_checkable to allow isinstance() verification,
    which is useful for validation and testing.
    """

    @property
    def provider(self) -> Provider:
        """Return the provider this adapter talks to."""
        ...

    def list_models(self) -> list[ModelDescriptor]:
        """Return the static descriptors of the models this provider offers."""
        ...

    def get_model(self, model_name: str) -> ModelDescriptor:
        """Resolve a model by display name or wire id.

        Raises:
            ModelNotFoundError: If the provider does not offer the model.

        """
        ...

    async def complete(
        self,
        messages: Sequence[Message],
        model_name: str,
        options: RequestOptions | None = None,
    ) -> CompletionResult:
        """Run a single completion.

        Args:
            messages: The conversation to send.
            model_name: Display name or wire id of the model.
            options: Generation parameters and optional structured-output
                example.

        Returns:
            Completion with raw text, parsed data and usage.

        Raises:
            ModelNotFoundError: If the model is unknown.
            RequestValidationError: If the request fails local validation.
            UpstreamError: If the provider returns a non-success response.

        """
        ...


@runtime_checkable
class BatchLLMProvider(Protocol):
    """Protocol for the batch lifecycle: create, check, retrieve, cancel.

    Polling is caller-driven: ``check_batch`` reports the current status
    and never waits.
    """

    async def create_batch(
        self,
        items: Sequence[BatchItem],
        model_name: str,
        options: BatchRequestOptions | None = None,
    ) -> BatchSubmission:
        """Submit many conversations as one batch job.

        Returns:
            The provider's batch id and one correlation id per item.

        Raises:
            CapabilityUnsupportedError: If the model does not support batches.
            RequestValidationError: If the batch fails local validation.
            UpstreamError: If the upload or creation request fails.

        """
        ...

    async def check_batch(self, batch_id: str, model_name: str) -> BatchStatus:
        """Return the unified status of a batch.

        Raises:
            CapabilityUnsupportedError: If the model does not support batches.
            UpstreamError: If the status request fails.

        """
        ...

    async def retrieve_batch(
        self, batch_id: str, model_name: str, example: Any = None
    ) -> list[CompletionResult]:
        """Download and parse the results of a completed batch.

        Raises:
            CapabilityUnsupportedError: If the model does not support batches.
            BatchNotReadyError: If the batch is not completed.
            UpstreamError: If a request fails.

        """
        ...

    async def cancel_batch(self, batch_id: str, model_name: str) -> bool:
        """Cancel an in-progress batch.

        Raises:
            CapabilityUnsupportedError: If the model does not support batches.
            UpstreamError: If the cancellation request fails.

        """
        ...
