"""Self-hosted remote provider speaking the Ollama chat API.

Requests go through an injectable transport and are retried with
exponential backoff on transient failures (transport errors and 5xx).
Client errors (4xx) end the loop immediately.
"""

import json
import logging
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from daemoncodex.llm.prompts import (
    CATEGORIZATION_SYSTEM_PROMPT,
    build_categorization_prompt,
    item_kind,
)
from daemoncodex.llm.transport import Transport, TransportResult, httpx_transport

from .base import (
    Capability,
    HealthStatus,
    ModelDescriptor,
    Provider,
    check_remote_privacy,
    may_share_path,
)
from .models import ErrorCode, LLMRequest, LLMResponse, Message, Role, TokenUsage

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"
HEALTH_PATH = "/api/version"
HEALTH_TIMEOUT_MS = 5000


class OllamaCloudProvider(Provider):
    """Provider for a remote Ollama-compatible server."""

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str | None = None,
        timeout_ms: int = 60000,
        max_retries: int = 2,
        backoff_base_ms: int = 500,
        transport: Transport | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        """Initialize Ollama Cloud provider.

        Args:
            base_url: Server base URL (e.g., "https://ollama.com")
            model: Model id served by the server
            api_key: Optional API key, sent as a bearer token
            timeout_ms: Default request timeout in milliseconds
            max_retries: Default number of retries after the first attempt
            backoff_base_ms: Default backoff base in milliseconds
            transport: HTTP transport (defaults to httpx)
            sleep: Sleep function taking seconds (defaults to time.sleep)
        """
        self.base_url = (base_url or "").strip().rstrip("/")
        self.model = (model or "").strip()
        self.api_key = (api_key or "").strip()
        self.timeout_ms = timeout_ms
        self.max_retries = max_retries
        self.backoff_base_ms = backoff_base_ms
        self._transport: Transport = transport or httpx_transport
        self._sleep = sleep or time.sleep

    @property
    def id(self) -> str:
        return "ollama-cloud"

    @property
    def display_name(self) -> str:
        return "Ollama Cloud"

    @property
    def capabilities(self) -> Capability:
        return Capability.REMOTE_INFERENCE | Capability.STREAMING

    @property
    def requires_network(self) -> bool:
        return True

    def is_configured(self) -> bool:
        return bool(self.base_url) and bool(self.model)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _exchange(self, url: str, method: str, body: str, timeout_ms: int) -> TransportResult:
        """Call the transport, turning anything it raises into a transport error."""
        try:
            return self._transport(url, method, body, self._headers(), timeout_ms)
        except Exception as e:
            logger.warning("Ollama Cloud transport raised for %s %s: %s", method, url, e)
            return TransportResult(transport_error=str(e) or type(e).__name__)

    def health_check(self) -> HealthStatus:
        if not self.is_configured():
            return HealthStatus.NOT_CONFIGURED

        result = self._exchange(f"{self.base_url}{HEALTH_PATH}", "GET", "", HEALTH_TIMEOUT_MS)
        if not result.ok:
            logger.info(
                "Ollama Cloud health check failed: status=%d error=%s",
                result.status_code,
                result.transport_error or "-",
            )
            return HealthStatus.UNAVAILABLE
        return HealthStatus.HEALTHY

    def list_models(self) -> list[ModelDescriptor]:
        if not self.model:
            return []
        return [
            ModelDescriptor(
                id=self.model,
                name=self.model,
                description="Model configured for Ollama Cloud",
                is_local=False,
            )
        ]

    def build_payload(self, request: LLMRequest) -> dict[str, Any]:
        """Build the chat payload for a request.

        Args:
            request: Request to serialize

        Returns:
            JSON-serializable payload for the chat endpoint
        """
        payload: dict[str, Any] = {
            "model": request.model or self.model,
            "stream": False,
            "messages": [{"role": msg.role.value, "content": msg.content} for msg in request.messages],
        }
        options: dict[str, Any] = {}
        if request.max_tokens:
            options["num_predict"] = request.max_tokens
        if request.temperature is not None:
            options["temperature"] = request.temperature
        if options:
            payload["options"] = options
        return payload

    def _send_with_retry(
        self,
        url: str,
        body: str,
        timeout_ms: int,
        max_retries: int,
        backoff_base_ms: int,
    ) -> TransportResult:
        """POST with exponential backoff.

        Retries are sequential on the caller's thread. The loop stops on
        success, on any 4xx status, or once ``max_retries`` retries are spent.
        """
        attempt = 0
        while True:
            result = self._exchange(url, "POST", body, timeout_ms)
            attempt += 1

            if result.ok or 400 <= result.status_code < 500:
                return result
            if attempt > max_retries:
                return result

            delay_ms = backoff_base_ms * (2 ** (attempt - 1))
            logger.warning(
                "Ollama Cloud attempt %d failed (status=%d error=%s), retrying in %d ms",
                attempt,
                result.status_code,
                result.transport_error or "-",
                delay_ms,
            )
            self._sleep(delay_ms / 1000.0)

    def _parse_response(self, request: LLMRequest, result: TransportResult, latency_ms: float) -> LLMResponse:
        model = request.model or self.model

        def fail(code: int, message: str) -> LLMResponse:
            return LLMResponse.failure(
                code,
                message,
                provider_id=self.id,
                model_id=model,
                privacy_level=request.privacy_level,
                used_remote_inference=True,
                latency_ms=latency_ms,
            )

        if result.transport_error:
            return fail(ErrorCode.CALL_FAILED, f"Ollama Cloud transport error: {result.transport_error}")
        if not result.ok:
            return fail(
                ErrorCode.CALL_FAILED,
                f"Ollama Cloud returned HTTP {result.status_code}: {result.body[:200]}",
            )

        try:
            data = json.loads(result.body)
        except json.JSONDecodeError as e:
            return fail(ErrorCode.BAD_RESPONSE, f"Ollama Cloud returned invalid JSON: {e}")
        if not isinstance(data, dict):
            return fail(ErrorCode.BAD_RESPONSE, "Ollama Cloud returned an unexpected response format")

        message = data.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            text = message["content"]
        elif isinstance(data.get("response"), str):
            text = data["response"]
        elif isinstance(data.get("error"), str):
            return fail(ErrorCode.CALL_FAILED, f"Ollama Cloud error: {data['error']}")
        else:
            return fail(ErrorCode.BAD_RESPONSE, "Ollama Cloud returned an unexpected response format")

        prompt_tokens = data.get("prompt_eval_count")
        completion_tokens = data.get("eval_count")
        usage = TokenUsage(
            prompt_tokens=prompt_tokens if isinstance(prompt_tokens, int) else 0,
            completion_tokens=completion_tokens if isinstance(completion_tokens, int) else 0,
        )
        served_model = data.get("model")

        return LLMResponse(
            text=text,
            usage=usage,
            provider_id=self.id,
            model_id=served_model if isinstance(served_model, str) and served_model else model,
            latency_ms=latency_ms,
            success=True,
            used_remote_inference=True,
            privacy_level_used=request.privacy_level,
        )

    def chat(self, request: LLMRequest) -> LLMResponse:
        blocked = check_remote_privacy(request, self.id)
        if blocked is not None:
            logger.warning("Ollama Cloud request blocked: %s", blocked.error_message)
            return blocked

        if not self.is_configured():
            return LLMResponse.failure(
                ErrorCode.CONFIG_MISSING,
                "Ollama Cloud base URL or model is missing",
                provider_id=self.id,
                model_id=request.model or self.model,
                privacy_level=request.privacy_level,
            )

        body = json.dumps(self.build_payload(request))
        timeout_ms = request.timeout_ms if request.timeout_ms is not None else self.timeout_ms
        max_retries = request.max_retries if request.max_retries is not None else self.max_retries
        backoff_base_ms = (
            request.backoff_base_ms if request.backoff_base_ms is not None else self.backoff_base_ms
        )

        start = time.perf_counter()
        result = self._send_with_retry(
            f"{self.base_url}{CHAT_PATH}",
            body,
            timeout_ms,
            max(0, max_retries),
            max(0, backoff_base_ms),
        )
        latency_ms = (time.perf_counter() - start) * 1000

        return self._parse_response(request, result, latency_ms)

    def categorize(
        self,
        name: str,
        path: str,
        is_directory: bool,
        consistency_context: str,
        base_request: LLMRequest,
    ) -> LLMResponse:
        blocked = check_remote_privacy(base_request, self.id)
        if blocked is not None:
            return blocked

        shared_path = path if may_share_path(base_request) else ""
        user_prompt = build_categorization_prompt(
            name, shared_path, item_kind(is_directory), consistency_context
        )
        request = replace(
            base_request,
            messages=[
                Message(role=Role.SYSTEM, content=CATEGORIZATION_SYSTEM_PROMPT),
                Message(role=Role.USER, content=user_prompt),
            ],
        )
        return self.chat(request)
