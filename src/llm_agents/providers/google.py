"""Google LLM provider implementation."""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Sequence
from typing import Any, NoReturn

from llm_agents.batch_types import BatchItem, BatchStatus, BatchSubmission
from llm_agents.errors import (
    CapabilityUnsupportedError,
    LLMConfigurationError,
    UpstreamError,
)
from llm_agents.formatting import (
    extract_gemini_text,
    extract_gemini_usage,
    to_gemini_contents,
)
from llm_agents.model_capabilities import GOOGLE_MODELS, ModelDescriptor, Provider
from llm_agents.output import parse_output
from llm_agents.providers._schema_utils import convert_to_gemini_schema
from llm_agents.providers.base import BaseProvider
from llm_agents.schema_inference import (
    infer_schema,
    inject_structure,
    requires_structured_output,
)
from llm_agents.transport import HttpRequest, Transport
from llm_agents.types import (
    BatchRequestOptions,
    CompletionResult,
    Message,
    RequestOptions,
)

logger = logging.getLogger(__name__)

DEFAULT_GOOGLE_BASE_URL = "https://generativelanguage.googleapis.com/v1"
DEFAULT_TEMPERATURE = 0.7

# response_schema is only accepted by the v1beta API surface.
_V1_SUFFIX = re.compile(r"/v1$")


class GoogleProvider(BaseProvider):
    """Google Gemini provider on the ``generateContent`` API.

    Satisfies the ``LLMProvider`` protocol. The batch operations of
    ``BatchLLMProvider`` are present but none of the Gemini models support
    them; each raises ``CapabilityUnsupportedError`` without a network call.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialise the Google provider.

        Args:
            api_key: Google API key. Falls back to GOOGLE_API_KEY env var.
            base_url: API base URL. Falls back to GOOGLE_BASE_URL env var,
                then to the public Generative Language API.
            transport: HTTP transport. Defaults to ``HttpxTransport``.

        Raises:
            LLMConfigurationError: If API key is not provided or found in environment.

        """
        resolved_key = api_key or os.getenv("GOOGLE_API_KEY")
        if not resolved_key:
            raise LLMConfigurationError(
                "Google API key is required. Set GOOGLE_API_KEY environment "
                "variable or provide api_key parameter."
            )

        super().__init__(
            api_key=resolved_key,
            base_url=(
                base_url or os.getenv("GOOGLE_BASE_URL") or DEFAULT_GOOGLE_BASE_URL
            ),
            transport=transport,
        )

        logger.debug(f"Initialised Google provider with base URL: {self._base_url}")

    @property
    def provider(self) -> Provider:
        """Return the provider this adapter talks to."""
        return Provider.GOOGLE

    @property
    def models(self) -> Sequence[ModelDescriptor]:
        """Return the static model descriptors."""
        return GOOGLE_MODELS

    def _build_body(
        self,
        model: ModelDescriptor,
        messages: Sequence[Message],
        options: RequestOptions,
    ) -> tuple[dict[str, Any], bool]:
        """Build a ``generateContent`` body.

        Returns:
            The request body and whether a native response schema was attached.

        """
        structured = requires_structured_output(options.example)
        native = structured and model.capabilities.structured_output

        if structured and not native:
            messages = inject_structure(messages, options.example)

        temperature = options.temperature
        if temperature is None:
            temperature = DEFAULT_TEMPERATURE

        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "topK": options.top_k,
            "topP": options.top_p,
            "maxOutputTokens": options.max_tokens,
            "presencePenalty": options.presence_penalty,
            "frequencyPenalty": options.frequency_penalty,
        }
        if native:
            generation_config["response_mime_type"] = "application/json"
            generation_config["response_schema"] = convert_to_gemini_schema(
                infer_schema(options.example)
            )
        generation_config = {
            key: value for key, value in generation_config.items() if value is not None
        }

        body = {
            "contents": to_gemini_contents(messages),
            "generationConfig": {**options.provider_params, **generation_config},
        }
        return body, native

    async def complete(
        self,
        messages: Sequence[Message],
        model_name: str,
        options: RequestOptions | None = None,
    ) -> CompletionResult:
        """Run a single ``generateContent`` call.

        Args:
            messages: The conversation to send.
            model_name: Display name or wire id of the model.
            options: Generation parameters and optional structured-output
                example.

        Returns:
            Completion with raw text, parsed data and usage.

        Raises:
            ModelNotFoundError: If the model is unknown.
            UpstreamError: If the API returns a non-success response.

        """
        options = options or RequestOptions()
        model = self.get_model(model_name)

        body, native = self._build_body(model, messages, options)
        base_url = self._base_url
        if native:
            base_url = _V1_SUFFIX.sub("/v1beta", base_url)

        response = await self._send(
            HttpRequest(
                method="POST",
                url=f"{base_url}/models/{model.id}:generateContent",
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self._api_key,
                },
                body=json.dumps(body).encode("utf-8"),
            ),
            "Google API error",
        )

        response_body = self._json_object(response, "Google API error")
        try:
            text = extract_gemini_text(response_body)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise UpstreamError(
                "Google API returned no candidates",
                status_code=response.status_code,
                payload=response_body,
            ) from e

        parsed = parse_output(text, options.example)
        return CompletionResult(
            text=text,
            data=parsed.value,
            usage=extract_gemini_usage(response_body),
            model=model.key,
            provider=Provider.GOOGLE,
        )

    # -------------------------------------------------------------------------
    # BatchLLMProvider protocol (unsupported by every Gemini model)
    # -------------------------------------------------------------------------

    def _reject_batch(self, model_name: str) -> NoReturn:
        model = self.get_model(model_name)
        raise CapabilityUnsupportedError(
            f"Batch requests are not supported by {self.provider.value} "
            f"for model {model.name.value}",
            model_name=model.name.value,
        )

    async def create_batch(
        self,
        items: Sequence[BatchItem],
        model_name: str,
        options: BatchRequestOptions | None = None,
    ) -> BatchSubmission:
        """Reject batch submission for Gemini models."""
        self._reject_batch(model_name)

    async def check_batch(self, batch_id: str, model_name: str) -> BatchStatus:
        """Reject batch status checks for Gemini models."""
        self._reject_batch(model_name)

    async def retrieve_batch(
        self, batch_id: str, model_name: str, example: Any = None
    ) -> list[CompletionResult]:
        """Reject batch retrieval for Gemini models."""
        self._reject_batch(model_name)

    async def cancel_batch(self, batch_id: str, model_name: str) -> bool:
        """Reject batch cancellation for Gemini models."""
        self._reject_batch(model_name)
