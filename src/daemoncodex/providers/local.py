"""On-device provider serving a GGUF model through llama.cpp."""

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from daemoncodex.llm.client import InferenceClient
from daemoncodex.llm.llamacpp import LlamaCppEngine
from daemoncodex.llm.prompts import item_kind

from .base import Capability, HealthStatus, ModelDescriptor, Provider, flatten_messages
from .models import ErrorCode, LLMRequest, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)

EngineFactory = Callable[[str], InferenceClient]


class LocalProvider(Provider):
    """Provider for a local model artifact.

    Requests never leave the device, so privacy levels are honored as-is
    and never rejected.
    """

    def __init__(
        self,
        model_path: str | Path,
        provider_id: str = "local",
        display_name: str = "Local",
        context_length: int = 4096,
        engine_factory: EngineFactory | None = None,
    ):
        """Initialize local provider.

        Args:
            model_path: Path to the model artifact on disk
            provider_id: Registry identity (distinct per configured model)
            display_name: Human-readable name
            context_length: Context window for the default engine
            engine_factory: Builds an inference client for a model path
                            (defaults to :class:`LlamaCppEngine`)
        """
        self.model_path = str(model_path) if model_path else ""
        self._id = provider_id
        self._display_name = display_name
        self.context_length = context_length
        self._engine_factory: EngineFactory = engine_factory or self._default_engine
        self._engine: InferenceClient | None = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def capabilities(self) -> Capability:
        return Capability.LOCAL_INFERENCE

    @property
    def requires_network(self) -> bool:
        return False

    @property
    def model_name(self) -> str:
        return Path(self.model_path).name if self.model_path else ""

    def _artifact_readable(self) -> bool:
        path = Path(self.model_path)
        return path.is_file() and os.access(path, os.R_OK)

    def is_configured(self) -> bool:
        return bool(self.model_path) and self._artifact_readable()

    def health_check(self) -> HealthStatus:
        if not self.model_path:
            return HealthStatus.NOT_CONFIGURED
        if not self._artifact_readable():
            return HealthStatus.UNAVAILABLE
        return HealthStatus.HEALTHY

    def list_models(self) -> list[ModelDescriptor]:
        path = Path(self.model_path) if self.model_path else None
        if path is None or not path.is_file():
            return []

        try:
            size = path.stat().st_size
        except OSError:
            size = 0

        return [
            ModelDescriptor(
                id=self.model_path,
                name=path.name,
                description="Local GGUF model",
                is_local=True,
                size_bytes=size,
                is_available=True,
            )
        ]

    def _default_engine(self, model_path: str) -> InferenceClient:
        return LlamaCppEngine(model_path, context_length=self.context_length)

    def _get_engine(self) -> InferenceClient:
        if self._engine is None:
            self._engine = self._engine_factory(self.model_path)
        return self._engine

    def _missing_model_response(self, request: LLMRequest) -> LLMResponse:
        return LLMResponse.failure(
            ErrorCode.CONFIG_MISSING,
            f"Local model not found or unreadable: {self.model_path or '<unset>'}",
            provider_id=self.id,
            model_id=request.model or self.model_name,
            privacy_level=request.privacy_level,
        )

    def _engine_failure(self, request: LLMRequest, error: Exception, latency_ms: float) -> LLMResponse:
        logger.error("Local inference failed for %s: %s", self.model_path, error)
        return LLMResponse.failure(
            ErrorCode.CALL_FAILED,
            f"Local inference failed: {error}",
            provider_id=self.id,
            model_id=request.model or self.model_name,
            privacy_level=request.privacy_level,
            latency_ms=latency_ms,
        )

    def _success(self, request: LLMRequest, text: str, latency_ms: float) -> LLMResponse:
        return LLMResponse(
            text=text,
            usage=TokenUsage(),
            provider_id=self.id,
            model_id=request.model or self.model_name,
            latency_ms=latency_ms,
            success=True,
            used_remote_inference=False,
            privacy_level_used=request.privacy_level,
        )

    def chat(self, request: LLMRequest) -> LLMResponse:
        if not self.is_configured():
            return self._missing_model_response(request)

        prompt = flatten_messages(request.messages)

        start = time.perf_counter()
        try:
            engine = self._get_engine()
            text = engine.complete_prompt(prompt, request.max_tokens, request.temperature)
        except Exception as e:
            return self._engine_failure(request, e, (time.perf_counter() - start) * 1000)
        latency_ms = (time.perf_counter() - start) * 1000

        return self._success(request, text, latency_ms)

    def categorize(
        self,
        name: str,
        path: str,
        is_directory: bool,
        consistency_context: str,
        base_request: LLMRequest,
    ) -> LLMResponse:
        if not self.is_configured():
            return self._missing_model_response(base_request)

        start = time.perf_counter()
        try:
            engine = self._get_engine()
            text = engine.categorize_item(
                name, path, item_kind(is_directory), consistency_context, base_request.temperature
            )
        except Exception as e:
            return self._engine_failure(base_request, e, (time.perf_counter() - start) * 1000)
        latency_ms = (time.perf_counter() - start) * 1000

        return self._success(base_request, text.strip(), latency_ms)
