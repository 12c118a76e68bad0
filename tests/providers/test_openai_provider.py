"""Tests for the OpenAI provider."""

from unittest.mock import MagicMock, patch

import pytest

from daemoncodex.providers.base import Capability, HealthStatus
from daemoncodex.providers.models import ErrorCode, PrivacyLevel
from daemoncodex.providers.openai_api import DEFAULT_OPENAI_MODEL, OpenAIProvider


@pytest.fixture
def calls():
    return []


@pytest.fixture
def provider(fake_engine, calls):
    def factory(api_key, model, timeout):
        calls.append((api_key, model))
        return fake_engine

    return OpenAIProvider("sk-test", "gpt-4o-mini", client_factory=factory)


class TestOpenAIProviderProperties:
    def test_identity(self, provider):
        assert provider.id == "openai"
        assert provider.display_name == "OpenAI"

    def test_remote_capabilities(self, provider):
        assert Capability.REMOTE_INFERENCE in provider.capabilities
        assert provider.requires_network is True

    def test_blank_model_uses_default(self):
        assert OpenAIProvider("sk-test", "  ").model == DEFAULT_OPENAI_MODEL

    def test_health_with_key(self, provider):
        assert provider.health_check() == HealthStatus.HEALTHY

    def test_health_without_key(self):
        provider = OpenAIProvider("", "gpt-4o-mini")
        assert provider.is_configured() is False
        assert provider.health_check() == HealthStatus.NOT_CONFIGURED

    def test_static_catalog(self, provider, calls):
        models = provider.list_models()

        assert any(m.id == "gpt-4o-mini" for m in models)
        assert all(not m.is_local for m in models)
        assert calls == []


class TestOpenAIProviderPrivacy:
    def test_local_only_request_blocked(self, provider, fake_engine, calls, make_request):
        response = provider.chat(make_request(privacy_level=PrivacyLevel.LOCAL_ONLY))

        assert response.success is False
        assert response.error_code == 403
        assert response.used_remote_inference is False
        assert calls == []
        assert fake_engine.prompts == []

    def test_full_content_without_consent_blocked(self, provider, calls, make_request):
        response = provider.chat(make_request(privacy_level=PrivacyLevel.FULL_CONTENT))

        assert response.error_code == ErrorCode.PRIVACY_BLOCKED
        assert response.used_remote_inference is False
        assert calls == []

    def test_full_content_with_consent_allowed(self, provider, make_request):
        response = provider.chat(
            make_request(privacy_level=PrivacyLevel.FULL_CONTENT, allow_content_upload=True)
        )
        assert response.success is True

    def test_privacy_checked_before_configuration(self, make_request):
        response = OpenAIProvider("").chat(make_request(privacy_level=PrivacyLevel.LOCAL_ONLY))
        assert response.error_code == ErrorCode.PRIVACY_BLOCKED

    def test_categorize_local_only_blocked(self, provider, fake_engine, make_request):
        response = provider.categorize(
            "a.pdf", "/x/a.pdf", False, "", make_request(privacy_level=PrivacyLevel.LOCAL_ONLY)
        )

        assert response.error_code == 403
        assert response.used_remote_inference is False
        assert fake_engine.items == []


class TestOpenAIProviderChat:
    def test_chat_success(self, provider, fake_engine, calls, make_request):
        response = provider.chat(make_request())

        assert response.success is True
        assert response.text == "Documents : Invoices"
        assert response.used_remote_inference is True
        assert response.provider_id == "openai"
        assert response.model_id == "gpt-4o-mini"
        assert calls == [("sk-test", "gpt-4o-mini")]
        assert len(fake_engine.prompts) == 1

    def test_request_model_overrides(self, provider, calls, make_request):
        response = provider.chat(make_request(model="gpt-4o"))

        assert response.model_id == "gpt-4o"
        assert calls == [("sk-test", "gpt-4o")]

    def test_missing_key_fails_without_call(self, make_request):
        calls = []
        provider = OpenAIProvider("", client_factory=lambda k, m, t: calls.append(k))

        response = provider.chat(make_request())

        assert response.error_code == ErrorCode.CONFIG_MISSING
        assert calls == []

    def test_client_error_wrapped_once(self, make_engine, make_request):
        engine = make_engine(error=RuntimeError("rate limited"))
        provider = OpenAIProvider("sk-test", client_factory=lambda k, m, t: engine)

        response = provider.chat(make_request())

        assert response.success is False
        assert response.error_code == ErrorCode.CALL_FAILED
        assert response.error_message == "OpenAI request failed: rate limited"
        assert len(engine.prompts) == 1


class TestOpenAIProviderCategorize:
    def test_path_withheld_by_default(self, provider, fake_engine, make_request):
        provider.categorize("tax.pdf", "/home/me/private/tax.pdf", False, "", make_request())

        assert fake_engine.items == [("tax.pdf", "", "file", "")]

    def test_path_sent_with_upload_consent(self, provider, fake_engine, make_request):
        provider.categorize(
            "tax.pdf", "/home/me/tax.pdf", False, "", make_request(allow_content_upload=True)
        )

        assert fake_engine.items[0][1] == "/home/me/tax.pdf"

    def test_path_withheld_for_content_excerpt(self, provider, fake_engine, make_request):
        provider.categorize(
            "tax.pdf",
            "/home/me/tax.pdf",
            False,
            "",
            make_request(privacy_level=PrivacyLevel.CONTENT_EXCERPT),
        )

        assert fake_engine.items[0][1] == ""


class TestOpenAIProviderSettings:
    @pytest.fixture
    def timeouts(self):
        return []

    @pytest.fixture
    def timed_provider(self, fake_engine, timeouts):
        def factory(api_key, model, timeout):
            timeouts.append(timeout)
            return fake_engine

        return OpenAIProvider("sk-test", timeout_ms=45000, client_factory=factory)

    def test_provider_timeout_reaches_client(self, timed_provider, timeouts, make_request):
        timed_provider.chat(make_request())
        assert timeouts == [45.0]

    def test_request_timeout_overrides(self, timed_provider, timeouts, make_request):
        timed_provider.chat(make_request(timeout_ms=2500))
        timed_provider.categorize("a.pdf", "", False, "", make_request(timeout_ms=1000))

        assert timeouts == [2.5, 1.0]

    def test_request_temperature_reaches_client(self, timed_provider, fake_engine, make_request):
        timed_provider.chat(make_request(temperature=0.7))
        timed_provider.categorize("a.pdf", "", False, "", make_request(temperature=0.0))

        assert fake_engine.temperatures == [0.7, 0.0]

    @patch("daemoncodex.llm.openai_client.OpenAI")
    def test_default_client_uses_timeout_and_temperature(self, mock_openai, make_request):
        create = mock_openai.return_value.chat.completions.create
        create.return_value.choices = [MagicMock()]
        create.return_value.choices[0].message.content = "Docs : Notes"

        response = OpenAIProvider("sk-test", timeout_ms=30000).chat(
            make_request(temperature=0.9, timeout_ms=12000)
        )

        assert response.success is True
        assert mock_openai.call_args.kwargs["timeout"] == 12.0
        assert create.call_args.kwargs["temperature"] == 0.9
