"""Tests for provider factory functions."""

from pathlib import Path

import pytest

from daemoncodex.config.schema import CodexConfig, CustomModelConfig
from daemoncodex.providers.factory import (
    LOCAL_3B_URL_ENV,
    LOCAL_7B_URL_ENV,
    LLMChoice,
    create_provider,
    create_provider_manager,
    model_path_from_download_url,
)
from daemoncodex.providers.local import LocalProvider
from daemoncodex.providers.models import PrivacyMode
from daemoncodex.providers.ollama_cloud import OllamaCloudProvider
from daemoncodex.providers.openai_api import OpenAIProvider


def config_for(choice: str) -> CodexConfig:
    config = CodexConfig()
    config.llm.choice = choice
    return config


class TestModelPath:
    def test_filename_from_url(self, tmp_path):
        url = "https://models.example.com/files/llama-3.2-3b-q4.gguf?download=true"
        assert model_path_from_download_url(url, tmp_path) == tmp_path / "llama-3.2-3b-q4.gguf"

    def test_percent_encoded_name(self, tmp_path):
        url = "https://example.com/my%20model.gguf"
        assert model_path_from_download_url(url, tmp_path).name == "my model.gguf"


class TestCreateProvider:
    def test_unset_returns_none(self, default_config):
        assert create_provider(default_config, env={}) is None

    def test_remote_with_config_key(self):
        config = config_for(LLMChoice.REMOTE)
        config.openai.api_key = "sk-config"
        config.openai.model = "gpt-4o"

        provider = create_provider(config, env={})

        assert isinstance(provider, OpenAIProvider)
        assert provider.api_key == "sk-config"
        assert provider.model == "gpt-4o"

    def test_remote_key_from_env(self):
        provider = create_provider(config_for("remote"), env={"OPENAI_API_KEY": "sk-env"})

        assert isinstance(provider, OpenAIProvider)
        assert provider.api_key == "sk-env"

    def test_remote_timeout_from_config(self):
        config = config_for("remote")
        config.openai.timeout = 15

        provider = create_provider(config, env={"OPENAI_API_KEY": "sk-env"})

        assert provider.timeout_ms == 15000

    def test_context_length_from_config(self, model_file):
        config = config_for("custom")
        config.local.custom_models = [CustomModelConfig(id="m", path=str(model_file))]
        config.local.active_custom_id = "m"
        config.local.context_length = 8192

        provider = create_provider(config, env={})

        assert provider.context_length == 8192

    def test_local_size_context_length_from_config(self, tmp_path):
        config = config_for("local_7b")
        config.local.models_dir = str(tmp_path)
        config.local.context_length = 2048

        provider = create_provider(config, env={LOCAL_7B_URL_ENV: "https://example.com/m.gguf"})

        assert provider.context_length == 2048

    def test_remote_without_key_returns_none(self):
        assert create_provider(config_for("remote"), env={}) is None

    @pytest.mark.parametrize(
        ("choice", "env_var", "provider_id"),
        [
            ("local_3b", LOCAL_3B_URL_ENV, "local-3b"),
            ("local_7b", LOCAL_7B_URL_ENV, "local-7b"),
        ],
    )
    def test_local_sizes(self, tmp_path, choice, env_var, provider_id):
        config = config_for(choice)
        config.local.models_dir = str(tmp_path)
        env = {env_var: "https://example.com/models/model-q4.gguf"}

        provider = create_provider(config, env=env)

        assert isinstance(provider, LocalProvider)
        assert provider.id == provider_id
        assert Path(provider.model_path) == tmp_path / "model-q4.gguf"

    def test_local_without_url_returns_none(self):
        assert create_provider(config_for("local_3b"), env={}) is None

    def test_custom_model(self, model_file):
        config = config_for("custom")
        config.local.custom_models = [
            CustomModelConfig(id="other", path="/models/other.gguf"),
            CustomModelConfig(id="mine", name="My Model", path=str(model_file)),
        ]
        config.local.active_custom_id = "mine"

        provider = create_provider(config, env={})

        assert isinstance(provider, LocalProvider)
        assert provider.id == "custom:mine"
        assert provider.display_name == "My Model"
        assert provider.is_configured() is True

    def test_custom_unknown_id_returns_none(self):
        config = config_for("custom")
        config.local.custom_models = [CustomModelConfig(id="a", path="/a.gguf")]
        config.local.active_custom_id = "b"

        assert create_provider(config, env={}) is None

    def test_ollama_cloud(self):
        config = config_for("ollama_cloud")
        config.ollama_cloud.model = "llama3.1:8b"
        config.ollama_cloud.max_retries = 5
        config.ollama_cloud.backoff_base_ms = 250

        provider = create_provider(config, env={"OLLAMA_API_KEY": "ok-env"})

        assert isinstance(provider, OllamaCloudProvider)
        assert provider.base_url == "https://ollama.com"
        assert provider.api_key == "ok-env"
        assert provider.max_retries == 5
        assert provider.backoff_base_ms == 250

    def test_ollama_cloud_without_model_returns_none(self):
        assert create_provider(config_for("ollama_cloud"), env={}) is None


class TestCreateProviderManager:
    def test_local_provider_activated(self, model_file):
        config = config_for("custom")
        config.local.custom_models = [CustomModelConfig(id="m", path=str(model_file))]
        config.local.active_custom_id = "m"

        manager = create_provider_manager(config, env={})

        assert manager.active_provider().id == "custom:m"
        assert manager.privacy_mode == PrivacyMode.LOCAL_ONLY

    def test_remote_mode_needs_confirmation(self):
        config = config_for("ollama_cloud")
        config.ollama_cloud.model = "llama3"
        config.privacy.mode = "remote-allowed"

        manager = create_provider_manager(config, env={})

        assert manager.privacy_mode == PrivacyMode.LOCAL_ONLY
        assert manager.get_provider("ollama-cloud") is not None
        assert manager.active_provider() is None

    def test_remote_confirmed(self):
        config = config_for("ollama_cloud")
        config.ollama_cloud.model = "llama3"
        config.privacy.mode = "remote-allowed"

        manager = create_provider_manager(config, remote_confirmed=True, env={})

        assert manager.remote_allowed is True
        assert manager.active_provider().id == "ollama-cloud"

    def test_confirmation_ignored_when_config_is_local_only(self):
        config = config_for("ollama_cloud")
        config.ollama_cloud.model = "llama3"

        manager = create_provider_manager(config, remote_confirmed=True, env={})

        assert manager.remote_allowed is False
        assert manager.active_provider() is None

    def test_unconfigured_gives_empty_manager(self, default_config):
        manager = create_provider_manager(default_config, env={})

        assert manager.all_providers() == []
        assert manager.active_provider() is None
