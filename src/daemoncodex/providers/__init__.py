"""Inference providers with privacy enforcement.

All requests pass through :class:`ProviderManager`, which holds the
process-wide privacy mode and refuses to send anything off the device
unless remote mode was explicitly confirmed and the request allows it.

Providers:

- :class:`LocalProvider` - on-device GGUF model via llama.cpp
- :class:`OpenAIProvider` - OpenAI commercial API
- :class:`OllamaCloudProvider` - self-hosted Ollama-compatible server, with retry
"""

from .audit import AuditSink, ProviderAuditLogger
from .base import Capability, HealthStatus, ModelDescriptor, Provider
from .factory import (
    LLMChoice,
    create_local_provider,
    create_ollama_cloud_provider,
    create_openai_provider,
    create_provider,
    create_provider_manager,
)
from .local import LocalProvider
from .manager import ProviderManager
from .models import (
    ErrorCode,
    LLMRequest,
    LLMResponse,
    Message,
    PrivacyLevel,
    PrivacyMode,
    Role,
    TokenUsage,
)
from .ollama_cloud import OllamaCloudProvider
from .openai_api import OpenAIProvider

__all__ = [
    "AuditSink",
    "Capability",
    "ErrorCode",
    "HealthStatus",
    "LLMChoice",
    "LLMRequest",
    "LLMResponse",
    "LocalProvider",
    "Message",
    "ModelDescriptor",
    "OllamaCloudProvider",
    "OpenAIProvider",
    "PrivacyLevel",
    "PrivacyMode",
    "Provider",
    "ProviderAuditLogger",
    "ProviderManager",
    "Role",
    "TokenUsage",
    "create_local_provider",
    "create_ollama_cloud_provider",
    "create_openai_provider",
    "create_provider",
    "create_provider_manager",
]
