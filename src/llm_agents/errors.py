"""LLM agent exceptions.

This module provides:
- LLMAgentError: Base exception class for all library errors
- LLMConfigurationError, UnsupportedProviderError: Configuration exceptions
- ModelNotFoundError: Unknown model for a provider
- RequestValidationError: Request rejected before any network call
- CapabilityUnsupportedError: Operation not supported by the model
- UpstreamError: Non-success response from a provider API
- BatchNotReadyError: Batch results requested before completion
"""

from __future__ import annotations

import json
from typing import Any


class LLMAgentError(Exception):
    """Base exception for all LLM agent errors."""

    pass


class LLMConfigurationError(LLMAgentError):
    """Exception raised when an agent or provider is misconfigured."""

    pass


class UnsupportedProviderError(LLMConfigurationError):
    """Exception raised when a model key names an unknown provider."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class ModelNotFoundError(LLMAgentError):
    """Exception raised when a model is not offered by a provider."""

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        super().__init__(f"Model not found: {model_name}")


class RequestValidationError(LLMAgentError):
    """Exception raised when a request fails local validation.

    Raised before any network call is made.
    """

    pass


class CapabilityUnsupportedError(LLMAgentError):
    """Exception raised when a model lacks the capability an operation needs."""

    def __init__(self, message: str, *, model_name: str) -> None:
        self.model_name = model_name
        super().__init__(message)


class UpstreamError(LLMAgentError):
    """Exception raised when a provider API returns a non-success response.

    The provider's error payload is kept verbatim on ``payload`` so callers
    can inspect provider-specific detail.
    """

    def __init__(self, context: str, *, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self.payload = payload
        rendered = payload if isinstance(payload, str) else json.dumps(payload)
        super().__init__(f"{context}: {rendered}")


class BatchNotReadyError(LLMAgentError):
    """Exception raised when batch results are requested before completion."""

    def __init__(self, batch_id: str, status: str) -> None:
        self.batch_id = batch_id
        self.status = status
        super().__init__(f"Batch {batch_id} is not completed yet (status: {status})")
