"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from daemoncodex.config.schema import CodexConfig
from daemoncodex.llm.transport import TransportResult
from daemoncodex.providers.models import LLMRequest, Message, PrivacyLevel, Role


class FakeEngine:
    """Inference client double recording its calls."""

    def __init__(self, reply: str = "Documents : Invoices", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[tuple[str, int]] = []
        self.items: list[tuple[str, str, str, str]] = []
        self.temperatures: list[float] = []

    def complete_prompt(self, text: str, max_tokens: int, temperature: float = 0.2) -> str:
        self.prompts.append((text, max_tokens))
        self.temperatures.append(temperature)
        if self.error:
            raise self.error
        return self.reply

    def categorize_item(
        self,
        name: str,
        path: str,
        kind: str,
        consistency_context: str,
        temperature: float = 0.2,
    ) -> str:
        self.items.append((name, path, kind, consistency_context))
        self.temperatures.append(temperature)
        if self.error:
            raise self.error
        return self.reply


class FakeTransport:
    """Transport double returning queued results and recording calls."""

    def __init__(self, *results: TransportResult):
        self.results = list(results)
        self.calls: list[dict] = []

    def __call__(self, url, method, body, headers, timeout_ms):
        self.calls.append(
            {"url": url, "method": method, "body": body, "headers": headers, "timeout_ms": timeout_ms}
        )
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


@pytest.fixture
def default_config() -> CodexConfig:
    """Provide a default configuration for tests."""
    return CodexConfig()


@pytest.fixture
def model_file(tmp_path: Path) -> Path:
    """A small stand-in GGUF file."""
    path = tmp_path / "test_model.gguf"
    path.write_bytes(b"dummy model content")
    return path


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_request():
    """Factory for requests with a single user message."""

    def _make(
        privacy_level: PrivacyLevel = PrivacyLevel.METADATA_ONLY,
        allow_content_upload: bool = False,
        **kwargs,
    ) -> LLMRequest:
        return LLMRequest(
            messages=[
                Message(role=Role.SYSTEM, content="You sort files."),
                Message(role=Role.USER, content="invoice_2024.pdf"),
            ],
            privacy_level=privacy_level,
            allow_content_upload=allow_content_upload,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_engine():
    """Factory for FakeEngine instances."""
    return FakeEngine


@pytest.fixture
def make_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport
