"""Data models for provider requests, responses and privacy settings."""

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum


class Role(StrEnum):
    """Author of a message in a request."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class PrivacyLevel(IntEnum):
    """How much data a single request may expose, ordered by exposure."""

    LOCAL_ONLY = 0  # Never leaves the device
    METADATA_ONLY = 1  # File names and kinds only
    CONTENT_EXCERPT = 2  # Short excerpts of content
    FULL_CONTENT = 3  # Full content and paths


class PrivacyMode(StrEnum):
    """Process-wide switch gating whether remote providers may be active."""

    LOCAL_ONLY = "local-only"
    REMOTE_ALLOWED = "remote-allowed"


class ErrorCode(IntEnum):
    """Error codes carried by failed responses."""

    NONE = 0
    CONFIG_MISSING = 1
    CALL_FAILED = 2
    BAD_RESPONSE = 3
    PRIVACY_BLOCKED = 403


@dataclass
class Message:
    """A role-tagged message in a request."""

    role: Role
    content: str


@dataclass
class TokenUsage:
    """Token counts reported for a single call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class LLMRequest:
    """A chat or categorization request.

    ``timeout_ms``, ``max_retries`` and ``backoff_base_ms`` left as ``None``
    fall back to the serving provider's configured values.
    """

    messages: list[Message] = field(default_factory=list)
    model: str = ""
    temperature: float = 0.2
    max_tokens: int = 256
    timeout_ms: int | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.METADATA_ONLY
    allow_content_upload: bool = False
    max_retries: int | None = None
    backoff_base_ms: int | None = None


@dataclass
class LLMResponse:
    """Result of a chat or categorization call."""

    text: str = ""
    usage: TokenUsage = field(default_factory=TokenUsage)
    provider_id: str = ""
    model_id: str = ""
    latency_ms: float = 0.0
    success: bool = False
    error_code: int = ErrorCode.NONE
    error_message: str = ""
    used_remote_inference: bool = False
    privacy_level_used: PrivacyLevel = PrivacyLevel.METADATA_ONLY

    @classmethod
    def failure(
        cls,
        error_code: int,
        error_message: str,
        *,
        provider_id: str = "",
        model_id: str = "",
        privacy_level: PrivacyLevel = PrivacyLevel.METADATA_ONLY,
        used_remote_inference: bool = False,
        latency_ms: float = 0.0,
    ) -> "LLMResponse":
        """Build a failed response."""
        return cls(
            provider_id=provider_id,
            model_id=model_id,
            latency_ms=latency_ms,
            success=False,
            error_code=error_code,
            error_message=error_message,
            used_remote_inference=used_remote_inference,
            privacy_level_used=privacy_level,
        )
