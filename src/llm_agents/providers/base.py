"""Shared plumbing for provider adapters."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from llm_agents.batch_types import BatchItem, BatchStatus, BatchSubmission
from llm_agents.errors import CapabilityUnsupportedError, UpstreamError
from llm_agents.model_capabilities import ModelDescriptor, Provider, find_model
from llm_agents.transport import HttpRequest, HttpResponse, HttpxTransport, Transport
from llm_agents.types import (
    BatchRequestOptions,
    CompletionResult,
    Message,
    RequestOptions,
)

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for provider adapters.

    Holds the immutable adapter configuration (API key, base URL and
    transport) and the static model list. Adapters keep no per-call state,
    so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        transport: Transport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._transport: Transport = transport or HttpxTransport()

    @property
    @abstractmethod
    def provider(self) -> Provider:
        """Return the provider this adapter talks to."""
        ...

    @property
    @abstractmethod
    def models(self) -> Sequence[ModelDescriptor]:
        """Return the static model descriptors."""
        ...

    @property
    def base_url(self) -> str:
        """Return the API base URL."""
        return self._base_url

    def list_models(self) -> list[ModelDescriptor]:
        """Return the static descriptors of the models this provider offers."""
        return list(self.models)

    def get_model(self, model_name: str) -> ModelDescriptor:
        """Resolve a model by display name or wire id.

        Raises:
            ModelNotFoundError: If the provider does not offer the model.

        """
        return find_model(self.models, model_name)

    def _require_batch_support(self, model: ModelDescriptor) -> None:
        if not model.capabilities.batch_requests:
            raise CapabilityUnsupportedError(
                f"Batch requests are not supported by {self.provider.value} "
                f"for model {model.name.value}",
                model_name=model.name.value,
            )

    async def _send(self, request: HttpRequest, context: str) -> HttpResponse:
        """Send ``request`` and raise ``UpstreamError`` on non-2xx responses."""
        logger.debug(f"{context}: {request.method} {request.url}")
        response = await self._transport(request)
        if not response.ok:
            payload = response.error_payload()
            logger.error(f"{context} failed with HTTP {response.status_code}")
            raise UpstreamError(
                context, status_code=response.status_code, payload=payload
            )
        return response

    def _json_object(
        self,
        response: HttpResponse,
        context: str,
        required: str | None = None,
    ) -> dict[str, Any]:
        """Decode a successful response body as a JSON object.

        Args:
            response: A 2xx response returned by ``_send``.
            context: Error message prefix.
            required: Optional key that must be present in the object.

        Raises:
            UpstreamError: If the body is not a JSON object or lacks
                ``required``.

        """
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"{context}: response body is not JSON")
            raise UpstreamError(
                context,
                status_code=response.status_code,
                payload=response.error_payload(),
            ) from e

        if not isinstance(body, dict) or (
            required is not None and required not in body
        ):
            logger.error(f"{context}: unexpected response shape")
            raise UpstreamError(
                context, status_code=response.status_code, payload=body
            )
        return body

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[Message],
        model_name: str,
        options: RequestOptions | None = None,
    ) -> CompletionResult:
        """Run a single completion."""
        ...

    @abstractmethod
    async def create_batch(
        self,
        items: Sequence[BatchItem],
        model_name: str,
        options: BatchRequestOptions | None = None,
    ) -> BatchSubmission:
        """Submit many conversations as one batch job."""
        ...

    @abstractmethod
    async def check_batch(self, batch_id: str, model_name: str) -> BatchStatus:
        """Return the unified status of a batch."""
        ...

    @abstractmethod
    async def retrieve_batch(
        self, batch_id: str, model_name: str, example: Any = None
    ) -> list[CompletionResult]:
        """Download and parse the results of a completed batch."""
        ...

    @abstractmethod
    async def cancel_batch(self, batch_id: str, model_name: str) -> bool:
        """Cancel an in-progress batch."""
        ...
