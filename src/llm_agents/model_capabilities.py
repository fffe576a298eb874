"""Model descriptor registry for the supported providers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from llm_agents.errors import ModelNotFoundError


class Provider(StrEnum):
    """Supported LLM providers."""

    OPENAI = "openai"
    GOOGLE = "google"


class ModelName(StrEnum):
    """Display names of the selectable models."""

    # OpenAI models
    GPT_4O_MINI = "GPT-4o-mini"
    GPT_4 = "GPT-4"

    # Google models
    GEMINI_2_FLASH = "Gemini 2.0 Flash"
    GEMINI_15 = "Gemini 1.5"
    GEMINI_10_PRO = "Gemini 1.0 Pro"


@dataclass(frozen=True)
class ModelCapabilities:
    """Immutable model capability flags.

    Attributes:
        structured_output: Whether the model can be asked for JSON output
            natively (JSON mode or a response schema).
        batch_requests: Whether the provider's batch API accepts the model.

    """

    structured_output: bool
    batch_requests: bool


@dataclass(frozen=True)
class ModelDescriptor:
    """Static metadata for one selectable model."""

    id: str
    """Identifier sent on the wire (e.g. ``gpt-4o-mini``)."""

    name: ModelName
    """Display name used in ``<provider>/<model>`` keys."""

    provider: Provider

    capabilities: ModelCapabilities

    @property
    def key(self) -> str:
        """Return the ``<provider>/<model>`` key for this model."""
        return f"{self.provider.value}/{self.name.value}"


OPENAI_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="gpt-4o-mini",
        name=ModelName.GPT_4O_MINI,
        provider=Provider.OPENAI,
        capabilities=ModelCapabilities(structured_output=True, batch_requests=True),
    ),
    # gpt-4 predates JSON mode
    ModelDescriptor(
        id="gpt-4",
        name=ModelName.GPT_4,
        provider=Provider.OPENAI,
        capabilities=ModelCapabilities(structured_output=False, batch_requests=True),
    ),
)

GOOGLE_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="gemini-2.0-flash",
        name=ModelName.GEMINI_2_FLASH,
        provider=Provider.GOOGLE,
        capabilities=ModelCapabilities(structured_output=True, batch_requests=False),
    ),
    ModelDescriptor(
        id="gemini-1.5-pro",
        name=ModelName.GEMINI_15,
        provider=Provider.GOOGLE,
        capabilities=ModelCapabilities(structured_output=True, batch_requests=False),
    ),
    ModelDescriptor(
        id="gemini-1.0-pro",
        name=ModelName.GEMINI_10_PRO,
        provider=Provider.GOOGLE,
        capabilities=ModelCapabilities(structured_output=False, batch_requests=False),
    ),
)


def find_model(models: Sequence[ModelDescriptor], model_name: str) -> ModelDescriptor:
    """Resolve a model by display name or wire identifier.

    Display names must match exactly; wire identifiers are matched
    case-insensitively.

    Args:
        models: The provider's static descriptor list.
        model_name: Display name (e.g. "GPT-4o-mini") or id ("gpt-4o-mini").

    Returns:
        The matching descriptor.

    Raises:
        ModelNotFoundError: If no descriptor matches.

    """
    for descriptor in models:
        if descriptor.name.value == model_name:
            return descriptor
    model_lower = model_name.lower()
    for descriptor in models:
        if descriptor.id == model_lower:
            return descriptor
    raise ModelNotFoundError(model_name)
