"""OpenAI LLM provider implementation."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from typing import Any

from llm_agents.batch import (
    completion_window,
    derive_request_ids,
    encode_jsonl,
    validate_batch_items,
)
from llm_agents.batch_types import (
    BatchItem,
    BatchStatus,
    BatchStatusLiteral,
    BatchSubmission,
)
from llm_agents.errors import (
    BatchNotReadyError,
    LLMConfigurationError,
    RequestValidationError,
    UpstreamError,
)
from llm_agents.formatting import (
    extract_openai_text,
    extract_openai_usage,
    to_openai_messages,
)
from llm_agents.model_capabilities import OPENAI_MODELS, ModelDescriptor, Provider
from llm_agents.output import parse_output
from llm_agents.providers.base import BaseProvider
from llm_agents.schema_inference import inject_structure, requires_structured_output
from llm_agents.transport import HttpRequest, Transport, encode_multipart
from llm_agents.types import (
    BatchRequestOptions,
    CompletionResult,
    Message,
    RequestOptions,
)

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
BATCH_ENDPOINT = "/v1/chat/completions"
DEFAULT_TEMPERATURE = 0.7

_JSON_MARKER_MESSAGE = 'A message for a structured output must contain "json"'


class OpenAIProvider(BaseProvider):
    """OpenAI provider on the chat completions, Files and Batch APIs.

    Satisfies both the ``LLMProvider`` and ``BatchLLMProvider`` protocols.
    Supports a custom base_url for OpenAI-compatible APIs.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialise the OpenAI provider.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            base_url: API base URL. Falls back to OPENAI_BASE_URL env var,
                then to the public OpenAI API.
            transport: HTTP transport. Defaults to ``HttpxTransport``.

        Raises:
            LLMConfigurationError: If no API key is provided or found.

        """
        resolved_key = api_key or os.getenv("OPENAI_API_KEY")
        if not resolved_key:
            raise LLMConfigurationError(
                "OpenAI API key is required. Set OPENAI_API_KEY environment "
                "variable or provide api_key parameter."
            )

        super().__init__(
            api_key=resolved_key,
            base_url=(
                base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL
            ),
            transport=transport,
        )

        logger.debug(f"Initialised OpenAI provider with base URL: {self._base_url}")

    @property
    def provider(self) -> Provider:
        """Return the provider this adapter talks to."""
        return Provider.OPENAI

    @property
    def models(self) -> Sequence[ModelDescriptor]:
        """Return the static model descriptors."""
        return OPENAI_MODELS

    def _headers(self, content_type: str | None = "application/json") -> dict[str, str]:
        token = self._api_key
        if not token.startswith("Bearer "):
            token = f"Bearer {token}"
        headers = {"Authorization": token}
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _build_body(
        self,
        model: ModelDescriptor,
        messages: Sequence[Message],
        options: RequestOptions,
    ) -> dict[str, Any]:
        """Build a chat completion request body.

        Native JSON mode is used when the model supports it; otherwise the
        structure instruction is injected into the messages.
        """
        structured = requires_structured_output(options.example)
        native = structured and model.capabilities.structured_output

        if structured and not native:
            messages = inject_structure(messages, options.example)

        temperature = options.temperature
        if temperature is None:
            temperature = DEFAULT_TEMPERATURE

        core: dict[str, Any] = {
            "model": model.id,
            "messages": to_openai_messages(messages),
            "temperature": temperature,
            "max_tokens": options.max_tokens,
            "top_p": options.top_p,
            "frequency_penalty": options.frequency_penalty,
            "presence_penalty": options.presence_penalty,
            "user": options.user or options.agent_name,
            "response_format": {"type": "json_object"} if native else None,
        }
        core = {key: value for key, value in core.items() if value is not None}
        return {**options.provider_params, **core}

    def _to_result(
        self,
        model: ModelDescriptor,
        body: dict[str, Any],
        example: Any,
        request_id: str | None = None,
    ) -> CompletionResult:
        text = extract_openai_text(body)
        parsed = parse_output(text, example)
        return CompletionResult(
            text=text,
            data=parsed.value,
            usage=extract_openai_usage(body),
            model=model.key,
            provider=Provider.OPENAI,
            request_id=request_id,
        )

    async def complete(
        self,
        messages: Sequence[Message],
        model_name: str,
        options: RequestOptions | None = None,
    ) -> CompletionResult:
        """Run a single chat completion.

        Args:
            messages: The conversation to send.
            model_name: Display name or wire id of the model.
            options: Generation parameters and optional structured-output
                example.

        Returns:
            Completion with raw text, parsed data and usage.

        Raises:
            ModelNotFoundError: If the model is unknown.
            RequestValidationError: If structured output is requested and
                no message mentions "json".
            UpstreamError: If the API returns a non-success response.

        """
        options = options or RequestOptions()
        model = self.get_model(model_name)

        if requires_structured_output(options.example) and not _mentions_json(messages):
            raise RequestValidationError(_JSON_MARKER_MESSAGE)

        body = self._build_body(model, messages, options)
        response = await self._send(
            HttpRequest(
                method="POST",
                url=f"{self._base_url}/chat/completions",
                headers=self._headers(),
                body=json.dumps(body).encode("utf-8"),
            ),
            "OpenAI API error",
        )

        response_body = self._json_object(response, "OpenAI API error")
        try:
            return self._to_result(model, response_body, options.example)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise UpstreamError(
                "OpenAI API returned no choices",
                status_code=response.status_code,
                payload=response_body,
            ) from e

    # -------------------------------------------------------------------------
    # BatchLLMProvider protocol
    # -------------------------------------------------------------------------

    async def _upload_file(self, content: bytes) -> str:
        """Upload a JSONL document for batch processing and return its file id."""
        body, content_type = encode_multipart(
            {"purpose": "batch"},
            {"file": ("batch.jsonl", content, "application/jsonl")},
        )
        response = await self._send(
            HttpRequest(
                method="POST",
                url=f"{self._base_url}/files",
                headers=self._headers(content_type),
                body=body,
            ),
            "Failed to upload file",
        )
        return str(self._json_object(response, "Failed to upload file", "id")["id"])

    async def create_batch(
        self,
        items: Sequence[BatchItem],
        model_name: str,
        options: BatchRequestOptions | None = None,
    ) -> BatchSubmission:
        """Submit many conversations as one batch job.

        Validates the batch, encodes one JSONL line per item, uploads the
        document via the Files API, then creates a batch referencing it.

        Args:
            items: Batch items in submission order.
            model_name: Display name or wire id of the model.
            options: Generation parameters, structured-output example,
                batch name and timeout.

        Returns:
            The batch id and one correlation id per item, in submission order.

        Raises:
            ModelNotFoundError: If the model is unknown.
            CapabilityUnsupportedError: If the model does not support batches.
            RequestValidationError: If the batch fails local validation.
            UpstreamError: If the upload or creation request fails.

        """
        options = options or BatchRequestOptions()
        model = self.get_model(model_name)
        self._require_batch_support(model)
        validate_batch_items(items)

        if requires_structured_output(options.example):
            for index, item in enumerate(items):
                if not _mentions_json(item.messages):
                    raise RequestValidationError(
                        f"Prompt {index}: {_JSON_MARKER_MESSAGE.lower()}"
                    )

        request_ids = derive_request_ids(
            items,
            batch_name=options.batch_name,
            agent_name=options.agent_name,
        )
        payload = encode_jsonl(
            {
                "custom_id": request_id,
                "method": "POST",
                "url": BATCH_ENDPOINT,
                "body": self._build_body(model, item.messages, options),
            }
            for request_id, item in zip(request_ids, items, strict=True)
        )

        file_id = await self._upload_file(payload)

        batch_request = {
            "input_file_id": file_id,
            "endpoint": BATCH_ENDPOINT,
            "completion_window": completion_window(options.timeout_seconds),
        }
        response = await self._send(
            HttpRequest(
                method="POST",
                url=f"{self._base_url}/batches",
                headers=self._headers(),
                body=json.dumps(batch_request).encode("utf-8"),
            ),
            "Failed to create batch",
        )
        created = self._json_object(response, "Failed to create batch", "id")
        batch_id = str(created["id"])

        logger.info(f"Submitted batch {batch_id} with {len(items)} request(s)")

        return BatchSubmission(batch_id=batch_id, request_ids=request_ids)

    async def check_batch(self, batch_id: str, model_name: str) -> BatchStatus:
        """Return the unified status of a batch.

        Args:
            batch_id: The provider's batch identifier from submission.
            model_name: Display name or wire id of the model.

        Returns:
            Current status, output file reference and error description.

        Raises:
            ModelNotFoundError: If the model is unknown.
            CapabilityUnsupportedError: If the model does not support batches.
            UpstreamError: If the status request fails.

        """
        model = self.get_model(model_name)
        self._require_batch_support(model)

        response = await self._send(
            HttpRequest(
                method="GET",
                url=f"{self._base_url}/batches/{batch_id}",
                headers=self._headers(content_type=None),
            ),
            "Failed to check batch status",
        )
        return _parse_batch_status(
            batch_id, self._json_object(response, "Failed to check batch status")
        )

    async def retrieve_batch(
        self, batch_id: str, model_name: str, example: Any = None
    ) -> list[CompletionResult]:
        """Download and parse the results of a completed batch.

        Lines that cannot be decoded, carry an error, or lack a response
        body are skipped with a warning. Results follow the output file's
        line order and carry their correlation id as ``request_id``.

        Args:
            batch_id: The provider's batch identifier from submission.
            model_name: Display name or wire id of the model.
            example: The example value the batch was submitted with.

        Returns:
            One result per successfully parsed output line.

        Raises:
            ModelNotFoundError: If the model is unknown.
            CapabilityUnsupportedError: If the model does not support batches.
            BatchNotReadyError: If the batch status is not ``completed``.
            UpstreamError: If a request fails.

        """
        status = await self.check_batch(batch_id, model_name)
        if status.status != "completed":
            raise BatchNotReadyError(batch_id, status.status)

        if not status.output_file_id:
            logger.warning(
                f"Batch {batch_id} completed without an output file "
                f"({status.error or 'no error reported'})"
            )
            return []

        model = self.get_model(model_name)
        response = await self._send(
            HttpRequest(
                method="GET",
                url=f"{self._base_url}/files/{status.output_file_id}/content",
                headers=self._headers(content_type=None),
            ),
            "Failed to retrieve batch results",
        )

        results: list[CompletionResult] = []
        for raw_line in response.text().splitlines():
            if not raw_line.strip():
                continue
            result = self._parse_result_line(raw_line, model, example)
            if result is not None:
                results.append(result)

        logger.debug(f"Retrieved {len(results)} result(s) from batch {batch_id}")
        return results

    def _parse_result_line(
        self, raw_line: str, model: ModelDescriptor, example: Any
    ) -> CompletionResult | None:
        """Parse one output line, returning None for lines that must be skipped.

        Each line contains:
        - ``custom_id``: the correlation id
        - ``error``: top-level error (non-null when the request was not dispatched)
        - ``response``: ``status_code`` and ``body`` with the completion
        """
        try:
            line = json.loads(raw_line)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse batch response: {e}")
            return None

        if not isinstance(line, dict):
            logger.warning(
                f"Skipping non-object batch response line: {raw_line[:200]}"
            )
            return None

        raw_id = line.get("custom_id")
        custom_id = None if raw_id is None else str(raw_id)
        if line.get("error"):
            error = line["error"]
            message = error
            if isinstance(error, dict):
                message = error.get("message", str(error))
            logger.warning(f"Batch response error for ID {custom_id}: {message}")
            return None

        response = line.get("response")
        if not isinstance(response, dict):
            response = {}
        body = response.get("body")
        if not isinstance(body, dict) or not body:
            logger.warning(f"Batch response error for ID {custom_id}: No response")
            return None

        status_code = response.get("status_code", 200)
        if status_code != 200:
            error_detail = body.get("error")
            message = None
            if isinstance(error_detail, dict):
                message = error_detail.get("message")
            message = message or f"Non-200 status: {status_code}"
            logger.warning(f"Batch response error for ID {custom_id}: {message}")
            return None

        try:
            return self._to_result(model, body, example, request_id=custom_id)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"Malformed batch response body for ID {custom_id}: {e}")
            return None

    async def cancel_batch(self, batch_id: str, model_name: str) -> bool:
        """Cancel an in-progress batch.

        Args:
            batch_id: The provider's batch identifier from submission.
            model_name: Display name or wire id of the model.

        Returns:
            True once the cancellation request is accepted.

        Raises:
            ModelNotFoundError: If the model is unknown.
            CapabilityUnsupportedError: If the model does not support batches.
            UpstreamError: If the cancellation request fails.

        """
        model = self.get_model(model_name)
        self._require_batch_support(model)

        await self._send(
            HttpRequest(
                method="POST",
                url=f"{self._base_url}/batches/{batch_id}/cancel",
                headers=self._headers(),
            ),
            "Failed to cancel batch",
        )
        logger.info(f"Cancelled batch {batch_id}")
        return True


_OPENAI_STATUS_MAP: dict[str, BatchStatusLiteral] = {
    "validating": "processing",
    "in_progress": "processing",
    "processing": "processing",
    "finalizing": "processing",
    "completed": "completed",
    "failed": "failed",
    "cancelled": "failed",
    "cancelling": "failed",
    "expired": "failed",
}


def _mentions_json(messages: Sequence[Message]) -> bool:
    return any("json" in message.content.lower() for message in messages)


def _parse_batch_status(batch_id: str, data: dict[str, Any]) -> BatchStatus:
    """Map an OpenAI batch object onto the unified BatchStatus."""
    status = _OPENAI_STATUS_MAP.get(data.get("status") or "", "pending")

    errors: list[str] = []
    if data.get("error_file_id"):
        errors.append(f"Error file ID: {data['error_file_id']}")
    batch_errors = data.get("errors") or {}
    for entry in batch_errors.get("data") or []:
        if entry.get("message"):
            errors.append(entry["message"])

    counts = data.get("request_counts") or {}

    return BatchStatus(
        batch_id=batch_id,
        status=status,
        output_file_id=data.get("output_file_id"),
        error="; ".join(errors) or None,
        total_count=counts.get("total") or 0,
        completed_count=counts.get("completed") or 0,
        failed_count=counts.get("failed") or 0,
    )


