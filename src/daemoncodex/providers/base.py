"""Provider contract shared by the local and remote backends.

Every provider exposes the same surface: identity, a capability set, a
fixed network requirement, configuration readiness, a health check, model
listing, and the two request operations (``chat`` and ``categorize``).

Remote providers re-check the privacy rules on every call, even though the
:class:`~daemoncodex.providers.manager.ProviderManager` already does, so a
provider invoked directly still refuses unsafe requests.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum

from .models import ErrorCode, LLMRequest, LLMResponse, Message, PrivacyLevel


class Capability(enum.Flag):
    """What a provider can do."""

    NONE = 0
    LOCAL_INFERENCE = enum.auto()
    REMOTE_INFERENCE = enum.auto()
    VISION = enum.auto()
    EMBEDDINGS = enum.auto()
    STREAMING = enum.auto()


class HealthStatus(StrEnum):
    """Point-in-time readiness of a provider."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"
    NOT_CONFIGURED = "not_configured"


@dataclass
class ModelDescriptor:
    """A model a provider can serve."""

    id: str
    name: str
    description: str = ""
    is_local: bool = False
    size_bytes: int | None = None
    parameter_count: int | None = None
    context_length: int | None = None
    is_available: bool = True


class Provider(ABC):
    """Base class for inference providers."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier used as the registry key."""

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable provider name."""

    @property
    @abstractmethod
    def capabilities(self) -> Capability:
        """Capability set of this provider."""

    @property
    @abstractmethod
    def requires_network(self) -> bool:
        """Whether requests leave the device."""

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether all required configuration is present."""

    @abstractmethod
    def health_check(self) -> HealthStatus:
        """Classify current readiness. Recomputed on every call."""

    @abstractmethod
    def list_models(self) -> list[ModelDescriptor]:
        """List models this provider can serve."""

    @abstractmethod
    def chat(self, request: LLMRequest) -> LLMResponse:
        """Run a chat request."""

    @abstractmethod
    def categorize(
        self,
        name: str,
        path: str,
        is_directory: bool,
        consistency_context: str,
        base_request: LLMRequest,
    ) -> LLMResponse:
        """Categorize a file or directory by name (and path when permitted)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def flatten_messages(messages: list[Message]) -> str:
    """Concatenate role-prefixed message bodies in order.

    Args:
        messages: Request messages

    Returns:
        Single prompt string, one ``Role: content`` block per message
    """
    return "\n\n".join(f"{msg.role.value.capitalize()}: {msg.content}" for msg in messages)


def may_share_path(request: LLMRequest) -> bool:
    """Whether a file path may be sent to a remote provider."""
    return request.allow_content_upload or request.privacy_level == PrivacyLevel.FULL_CONTENT


def check_remote_privacy(request: LLMRequest, provider_id: str) -> LLMResponse | None:
    """Apply the per-request privacy rules for network providers.

    Args:
        request: Incoming request
        provider_id: Identity of the provider being asked

    Returns:
        A 403 failure response if the request must not leave the device,
        otherwise None
    """
    if request.privacy_level == PrivacyLevel.LOCAL_ONLY:
        return LLMResponse.failure(
            ErrorCode.PRIVACY_BLOCKED,
            "Request is marked LocalOnly and cannot be sent to a remote provider",
            provider_id=provider_id,
            model_id=request.model,
            privacy_level=request.privacy_level,
        )

    if request.privacy_level == PrivacyLevel.FULL_CONTENT and not request.allow_content_upload:
        return LLMResponse.failure(
            ErrorCode.PRIVACY_BLOCKED,
            "Request asks for FullContent but content upload was not allowed",
            provider_id=provider_id,
            model_id=request.model,
            privacy_level=request.privacy_level,
        )

    return None
