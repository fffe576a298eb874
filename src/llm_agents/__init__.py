"""Multi-provider LLM agents with structured output and batch jobs."""

__version__ = "0.1.0"

from llm_agents.agent import LLMAgent, create_agent, prepend_base_prompt
from llm_agents.batch_types import BatchItem, BatchStatus, BatchSubmission
from llm_agents.config import AgentConfiguration
from llm_agents.errors import (
    BatchNotReadyError,
    CapabilityUnsupportedError,
    LLMAgentError,
    LLMConfigurationError,
    ModelNotFoundError,
    RequestValidationError,
    UnsupportedProviderError,
    UpstreamError,
)
from llm_agents.factory import ProviderFactory
from llm_agents.model_capabilities import (
    ModelCapabilities,
    ModelDescriptor,
    ModelName,
    Provider,
)
from llm_agents.providers import GoogleProvider, OpenAIProvider
from llm_agents.schema_inference import infer_schema
from llm_agents.transport import HttpRequest, HttpResponse, HttpxTransport, Transport
from llm_agents.types import (
    BatchRequestOptions,
    CompletionResult,
    Message,
    RequestOptions,
    Usage,
)

__all__ = [
    # Version
    "__version__",
    # Agent
    "LLMAgent",
    "create_agent",
    "prepend_base_prompt",
    "AgentConfiguration",
    # Types
    "Message",
    "RequestOptions",
    "BatchRequestOptions",
    "CompletionResult",
    "Usage",
    "BatchItem",
    "BatchStatus",
    "BatchSubmission",
    "Provider",
    "ModelName",
    "ModelCapabilities",
    "ModelDescriptor",
    # Errors
    "LLMAgentError",
    "LLMConfigurationError",
    "UnsupportedProviderError",
    "ModelNotFoundError",
    "RequestValidationError",
    "CapabilityUnsupportedError",
    "UpstreamError",
    "BatchNotReadyError",
    # Providers
    "ProviderFactory",
    "OpenAIProvider",
    "GoogleProvider",
    "infer_schema",
    # Transport
    "Transport",
    "HttpxTransport",
    "HttpRequest",
    "HttpResponse",
]
