"""Commercial remote provider backed by the OpenAI API."""

import logging
import time
from collections.abc import Callable

from daemoncodex.llm.client import InferenceClient
from daemoncodex.llm.openai_client import OpenAIEngine
from daemoncodex.llm.prompts import item_kind

from .base import (
    Capability,
    HealthStatus,
    ModelDescriptor,
    Provider,
    check_remote_privacy,
    flatten_messages,
    may_share_path,
)
from .models import ErrorCode, LLMRequest, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
ERROR_PREFIX = "OpenAI request failed"

# (api_key, model, timeout in seconds) -> client
ClientFactory = Callable[[str, str, float], InferenceClient]

OPENAI_MODELS: list[ModelDescriptor] = [
    ModelDescriptor(
        id="gpt-4o-mini",
        name="GPT-4o mini",
        description="Fast, low-cost general model",
        context_length=128000,
    ),
    ModelDescriptor(
        id="gpt-4o",
        name="GPT-4o",
        description="High-quality multimodal model",
        context_length=128000,
    ),
    ModelDescriptor(
        id="gpt-4.1-mini",
        name="GPT-4.1 mini",
        description="Balanced speed and quality",
        context_length=1047576,
    ),
    ModelDescriptor(
        id="gpt-4.1",
        name="GPT-4.1",
        description="Flagship model for complex tasks",
        context_length=1047576,
    ),
]


def _default_client_factory(api_key: str, model: str, timeout: float) -> InferenceClient:
    return OpenAIEngine(api_key=api_key, model=model, timeout=timeout)


class OpenAIProvider(Provider):
    """Provider that sends requests to the OpenAI API.

    The underlying client is blocking, so each request makes exactly one
    call with no retry loop.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "",
        timeout_ms: int = 60000,
        client_factory: ClientFactory | None = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (empty means not configured)
            model: Model id; blank selects the default model
            timeout_ms: Default request timeout in milliseconds
            client_factory: Builds an inference client from
                            (api_key, model, timeout in seconds)
        """
        self.api_key = (api_key or "").strip()
        self.model = model.strip() or DEFAULT_OPENAI_MODEL
        self.timeout_ms = timeout_ms
        self._client_factory: ClientFactory = client_factory or _default_client_factory

    @property
    def id(self) -> str:
        return "openai"

    @property
    def display_name(self) -> str:
        return "OpenAI"

    @property
    def capabilities(self) -> Capability:
        return Capability.REMOTE_INFERENCE | Capability.VISION | Capability.STREAMING

    @property
    def requires_network(self) -> bool:
        return True

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def health_check(self) -> HealthStatus:
        # A live probe costs money and latency; key presence is the only signal.
        if not self.is_configured():
            return HealthStatus.NOT_CONFIGURED
        return HealthStatus.HEALTHY

    def list_models(self) -> list[ModelDescriptor]:
        return [
            ModelDescriptor(
                id=m.id,
                name=m.name,
                description=m.description,
                is_local=False,
                context_length=m.context_length,
            )
            for m in OPENAI_MODELS
        ]

    def _precheck(self, request: LLMRequest) -> LLMResponse | None:
        blocked = check_remote_privacy(request, self.id)
        if blocked is not None:
            logger.warning("OpenAI request blocked: %s", blocked.error_message)
            return blocked

        if not self.is_configured():
            return LLMResponse.failure(
                ErrorCode.CONFIG_MISSING,
                "OpenAI API key is missing",
                provider_id=self.id,
                model_id=request.model or self.model,
                privacy_level=request.privacy_level,
            )
        return None

    def _call(self, request: LLMRequest, call: Callable[[InferenceClient], str]) -> LLMResponse:
        model = request.model or self.model
        timeout_ms = request.timeout_ms if request.timeout_ms is not None else self.timeout_ms
        start = time.perf_counter()
        try:
            text = call(self._client_factory(self.api_key, model, timeout_ms / 1000.0))
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.error("%s: %s", ERROR_PREFIX, e)
            return LLMResponse.failure(
                ErrorCode.CALL_FAILED,
                f"{ERROR_PREFIX}: {e}",
                provider_id=self.id,
                model_id=model,
                privacy_level=request.privacy_level,
                used_remote_inference=True,
                latency_ms=latency_ms,
            )
        latency_ms = (time.perf_counter() - start) * 1000

        return LLMResponse(
            text=text,
            usage=TokenUsage(),
            provider_id=self.id,
            model_id=model,
            latency_ms=latency_ms,
            success=True,
            used_remote_inference=True,
            privacy_level_used=request.privacy_level,
        )

    def chat(self, request: LLMRequest) -> LLMResponse:
        failure = self._precheck(request)
        if failure is not None:
            return failure

        prompt = flatten_messages(request.messages)
        return self._call(
            request,
            lambda client: client.complete_prompt(prompt, request.max_tokens, request.temperature),
        )

    def categorize(
        self,
        name: str,
        path: str,
        is_directory: bool,
        consistency_context: str,
        base_request: LLMRequest,
    ) -> LLMResponse:
        failure = self._precheck(base_request)
        if failure is not None:
            return failure

        # Only the name leaves the device unless the caller opted in
        shared_path = path if may_share_path(base_request) else ""
        kind = item_kind(is_directory)
        return self._call(
            base_request,
            lambda client: client.categorize_item(
                name, shared_path, kind, consistency_context, base_request.temperature
            ),
        )
