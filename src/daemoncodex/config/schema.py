"""Pydantic models for daemoncodex.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from daemoncodex.providers.models import PrivacyLevel, PrivacyMode


class LLMConfig(BaseModel):
    """Provider selection and request defaults."""

    choice: Literal["unset", "remote", "local_3b", "local_7b", "custom", "ollama_cloud"] = Field(
        default="unset",
        description="Which provider to build: OpenAI ('remote'), a bundled local model, "
        "a custom local model, or Ollama Cloud",
    )
    temperature: float = Field(default=0.2, description="Sampling temperature", ge=0.0, le=2.0)
    max_tokens: int = Field(default=256, description="Maximum tokens to generate", ge=1)


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""

    api_key: str | None = Field(default=None, description="API key (overrides api_key_env)")
    api_key_env: str = Field(
        default="OPENAI_API_KEY",
        description="Environment variable name containing the API key",
    )
    model: str = Field(default="gpt-4o-mini", description="Model id")
    timeout: int = Field(default=60, description="Request timeout in seconds", ge=1)


class CustomModelConfig(BaseModel):
    """A user-supplied local model."""

    id: str = Field(description="Identifier for this model")
    name: str = Field(default="", description="Display name")
    path: str = Field(default="", description="Path to the GGUF file")


class LocalConfig(BaseModel):
    """On-device model configuration."""

    models_dir: str = Field(
        default="~/.local/share/daemoncodex/llms",
        description="Directory where downloaded models are stored",
    )
    custom_models: list[CustomModelConfig] = Field(
        default_factory=list,
        description="User-supplied local models",
    )
    active_custom_id: str | None = Field(
        default=None,
        description="Id of the custom model used when choice is 'custom'",
    )
    context_length: int = Field(default=4096, description="Context window size", ge=512)


class OllamaCloudConfig(BaseModel):
    """Self-hosted / Ollama Cloud server configuration."""

    base_url: str = Field(default="https://ollama.com", description="Server base URL")
    api_key: str | None = Field(default=None, description="API key (overrides api_key_env)")
    api_key_env: str = Field(
        default="OLLAMA_API_KEY",
        description="Environment variable name containing the API key",
    )
    model: str = Field(default="", description="Model id served by the server")
    timeout_ms: int = Field(default=60000, description="Request timeout in milliseconds", ge=100)
    max_retries: int = Field(default=2, description="Retries after the first attempt", ge=0, le=10)
    backoff_base_ms: int = Field(
        default=500,
        description="Base delay for exponential backoff in milliseconds",
        ge=0,
    )


class PrivacyConfig(BaseModel):
    """Privacy defaults."""

    mode: PrivacyMode = Field(
        default=PrivacyMode.LOCAL_ONLY,
        description="'local-only' (default, nothing leaves the device) or 'remote-allowed' "
        "(remote providers may be activated after confirmation)",
    )
    default_level: str = Field(
        default="metadata_only",
        description="Privacy level applied to requests that don't set one "
        "(local_only, metadata_only, content_excerpt, full_content)",
    )
    allow_content_upload: bool = Field(
        default=False,
        description="Allow file paths and content to be sent to remote providers",
    )

    @field_validator("default_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level.upper() not in PrivacyLevel.__members__:
            names = ", ".join(name.lower() for name in PrivacyLevel.__members__)
            raise ValueError(f"unknown privacy level {value!r} (expected one of: {names})")
        return level

    @property
    def request_level(self) -> PrivacyLevel:
        """Default privacy level as the enum carried by requests."""
        return PrivacyLevel[self.default_level.upper()]


class CodexConfig(BaseModel):
    """Root configuration schema for daemoncodex."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    local: LocalConfig = Field(default_factory=LocalConfig)
    ollama_cloud: OllamaCloudConfig = Field(default_factory=OllamaCloudConfig)
    privacy: PrivacyConfig = Field(default_factory=PrivacyConfig)
