"""Unified agent facade over the provider adapters.

An agent binds a name, a base prompt and one ``<provider>/<model>`` key.
It prepends the base prompt to every conversation, tags requests with the
agent name and forwards everything else to the selected provider.

Typical usage::

    agent = create_agent(
        name="geographer",
        base_prompt="You answer geography questions in JSON with name and capital.",
        model="openai/GPT-4o-mini",
        api_key="sk-...",
        example={"name": "", "capital": ""},
    )
    result = await agent.complete([Message.user("Tell me about France")])
    print(result.data["capital"])
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Self, TypeVar

from pydantic import BaseModel

from llm_agents.batch_types import BatchItem, BatchStatus, BatchSubmission
from llm_agents.config import AgentConfiguration
from llm_agents.errors import CapabilityUnsupportedError
from llm_agents.factory import ProviderFactory, split_model_key
from llm_agents.model_capabilities import ModelDescriptor, Provider
from llm_agents.providers.base import BaseProvider
from llm_agents.transport import Transport
from llm_agents.types import (
    BatchRequestOptions,
    CompletionResult,
    Message,
    RequestOptions,
)

logger = logging.getLogger(__name__)

O = TypeVar("O", bound=RequestOptions)

_PROVIDER_LABELS = {
    Provider.OPENAI: "OpenAI",
    Provider.GOOGLE: "Google",
}


def prepend_base_prompt(base_prompt: str, messages: Sequence[Message]) -> list[Message]:
    """Return a new conversation starting with ``base_prompt``.

    Existing developer and system messages are dropped so the base prompt
    is the only system-level instruction. With an empty base prompt the
    messages are returned unchanged (as a new list).
    """
    if not base_prompt:
        return list(messages)
    return [
        Message(role="developer", content=base_prompt),
        *(m for m in messages if m.role not in ("developer", "system")),
    ]


def unmentioned_keys(example: Any, prompt: str) -> list[str]:
    """List the example's keys that ``prompt`` never mentions.

    Keys are collected recursively (through the first element of arrays)
    and reported as dotted paths. Matching is case-insensitive.
    """
    if isinstance(example, BaseModel):
        example = example.model_dump(mode="json")

    prompt_lower = prompt.lower()
    missing: list[str] = []

    def check(value: Any, prefix: str) -> None:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            if value:
                check(value[0], prefix)
        elif isinstance(value, Mapping):
            for key, item in value.items():  # type: ignore[reportUnknownVariableType]
                full_key = f"{prefix}.{key}" if prefix else str(key)
                if str(key).lower() not in prompt_lower:
                    missing.append(full_key)
                check(item, full_key)

    check(example, "")
    return missing


class LLMAgent:
    """A named agent bound to one model.

    The provider is resolved from the model key at construction time; an
    unknown provider raises ``UnsupportedProviderError`` and an unknown
    model raises ``ModelNotFoundError``.
    """

    def __init__(
        self,
        name: str,
        base_prompt: str,
        model: str,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: Transport | None = None,
        example: Any = None,
    ) -> None:
        """Initialise the agent.

        Args:
            name: Agent name, sent as the request user tag and used in
                correlation ids.
            base_prompt: Developer prompt prepended to every conversation.
            model: Model key in ``<provider>/<model>`` form
                (e.g. "openai/GPT-4o-mini").
            api_key: API key (provider-specific env var if not provided).
            base_url: Optional API base URL override.
            transport: Optional HTTP transport.
            example: Optional example value requesting structured output.

        Raises:
            UnsupportedProviderError: If the provider segment is unknown.
            ModelNotFoundError: If the provider does not offer the model.
            LLMConfigurationError: If no API key is available.

        """
        self.name = name
        self.base_prompt = base_prompt
        self.model = model
        self.provider, self.model_name = split_model_key(model)
        self.example = example

        self._provider: BaseProvider = ProviderFactory.create_provider(
            self.provider, api_key=api_key, base_url=base_url, transport=transport
        )
        self.descriptor: ModelDescriptor = self._provider.get_model(self.model_name)

        if example is not None:
            missing = unmentioned_keys(example, base_prompt)
            if missing:
                logger.warning(
                    f"The following fields are not mentioned in the base prompt of "
                    f"agent '{name}' and may be ignored by the LLM: "
                    f"{', '.join(missing)}"
                )

    @classmethod
    def from_configuration(
        cls,
        config: AgentConfiguration,
        transport: Transport | None = None,
        example: Any = None,
    ) -> Self:
        """Create an agent from a validated configuration."""
        return cls(
            name=config.name,
            base_prompt=config.base_prompt,
            model=config.model,
            api_key=config.api_key,
            base_url=config.base_url,
            transport=transport,
            example=example,
        )

    def list_models(self) -> list[ModelDescriptor]:
        """Return the models offered by this agent's provider."""
        return self._provider.list_models()

    def _with_agent(self, options: O) -> O:
        update: dict[str, Any] = {"agent_name": self.name}
        if self.example is not None:
            update["example"] = self.example
        return options.model_copy(update=update)

    def _to_batch_item(self, prompt: BatchItem | Sequence[Message]) -> BatchItem:
        if isinstance(prompt, BatchItem):
            return BatchItem(
                id=prompt.id,
                messages=prepend_base_prompt(self.base_prompt, prompt.messages),
            )
        return BatchItem(messages=prepend_base_prompt(self.base_prompt, prompt))

    def _capability_error(
        self, error: CapabilityUnsupportedError
    ) -> CapabilityUnsupportedError:
        label = _PROVIDER_LABELS.get(self.provider, self.provider.value)
        return CapabilityUnsupportedError(
            f'The agent "{self.name}" uses {label}\'s {self.model_name} '
            f"which doesn't support batch operations",
            model_name=error.model_name,
        )

    async def complete(
        self,
        messages: Sequence[Message],
        options: RequestOptions | None = None,
    ) -> CompletionResult:
        """Send a conversation to the model, prefixed by the base prompt."""
        return await self._provider.complete(
            prepend_base_prompt(self.base_prompt, messages),
            self.model_name,
            self._with_agent(options or RequestOptions()),
        )

    async def create_batch(
        self,
        prompts: Sequence[BatchItem | Sequence[Message]],
        options: BatchRequestOptions | None = None,
    ) -> BatchSubmission:
        """Submit many conversations as one batch job.

        Args:
            prompts: Message lists or ``BatchItem``s carrying their own ids.
            options: Batch options (name, timeout, generation parameters).

        Returns:
            The batch id and one correlation id per prompt.

        Raises:
            CapabilityUnsupportedError: If the agent's model cannot batch.

        """
        items = [self._to_batch_item(prompt) for prompt in prompts]
        try:
            return await self._provider.create_batch(
                items,
                self.model_name,
                self._with_agent(options or BatchRequestOptions()),
            )
        except CapabilityUnsupportedError as e:
            raise self._capability_error(e) from e

    async def check_batch(self, batch_id: str) -> BatchStatus:
        """Return the unified status of a batch."""
        try:
            return await self._provider.check_batch(batch_id, self.model_name)
        except CapabilityUnsupportedError as e:
            raise self._capability_error(e) from e

    async def retrieve_batch(self, batch_id: str) -> list[CompletionResult]:
        """Retrieve the results of a completed batch."""
        try:
            return await self._provider.retrieve_batch(
                batch_id, self.model_name, self.example
            )
        except CapabilityUnsupportedError as e:
            raise self._capability_error(e) from e

    async def cancel_batch(self, batch_id: str) -> bool:
        """Cancel an in-progress batch."""
        try:
            return await self._provider.cancel_batch(batch_id, self.model_name)
        except CapabilityUnsupportedError as e:
            raise self._capability_error(e) from e


def create_agent(
    name: str,
    base_prompt: str,
    model: str,
    api_key: str | None = None,
    base_url: str | None = None,
    transport: Transport | None = None,
    example: Any = None,
) -> LLMAgent:
    """Create an agent. See ``LLMAgent`` for the arguments."""
    return LLMAgent(
        name=name,
        base_prompt=base_prompt,
        model=model,
        api_key=api_key,
        base_url=base_url,
        transport=transport,
        example=example,
    )
