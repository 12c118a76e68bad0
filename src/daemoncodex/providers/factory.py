"""Factory functions for creating providers from configuration."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from .base import Provider
from .local import LocalProvider
from .manager import ProviderManager
from .models import PrivacyMode
from .ollama_cloud import OllamaCloudProvider
from .openai_api import OpenAIProvider

if TYPE_CHECKING:
    from daemoncodex.config.schema import CodexConfig
    from daemoncodex.providers.audit import ProviderAuditLogger

logger = logging.getLogger(__name__)

LOCAL_3B_URL_ENV = "LOCAL_LLM_3B_DOWNLOAD_URL"
LOCAL_7B_URL_ENV = "LOCAL_LLM_7B_DOWNLOAD_URL"


class LLMChoice(StrEnum):
    """Provider kinds selectable in configuration."""

    UNSET = "unset"
    REMOTE = "remote"
    LOCAL_3B = "local_3b"
    LOCAL_7B = "local_7b"
    CUSTOM = "custom"
    OLLAMA_CLOUD = "ollama_cloud"


def model_path_from_download_url(url: str, models_dir: str | Path) -> Path:
    """Derive where a downloaded model lives from its download URL.

    Args:
        url: Model download URL
        models_dir: Directory holding downloaded models

    Returns:
        ``<models_dir>/<file name of the URL>``
    """
    filename = Path(unquote(urlparse(url).path)).name
    return Path(models_dir).expanduser() / filename


def _resolve_key(explicit: str | None, env_name: str, env: Mapping[str, str]) -> str:
    if explicit and explicit.strip():
        return explicit.strip()
    return env.get(env_name, "").strip()


def create_openai_provider(api_key: str, model: str = "", timeout_ms: int = 60000) -> OpenAIProvider:
    return OpenAIProvider(api_key=api_key, model=model, timeout_ms=timeout_ms)


def create_local_provider(
    model_path: str | Path,
    provider_id: str = "local",
    display_name: str = "Local",
    context_length: int = 4096,
) -> LocalProvider:
    return LocalProvider(
        model_path,
        provider_id=provider_id,
        display_name=display_name,
        context_length=context_length,
    )


def create_ollama_cloud_provider(
    api_key: str | None,
    base_url: str,
    model: str,
    timeout_ms: int = 60000,
    max_retries: int = 2,
    backoff_base_ms: int = 500,
) -> OllamaCloudProvider:
    return OllamaCloudProvider(
        base_url=base_url,
        model=model,
        api_key=api_key,
        timeout_ms=timeout_ms,
        max_retries=max_retries,
        backoff_base_ms=backoff_base_ms,
    )


def create_provider(config: CodexConfig, env: Mapping[str, str] | None = None) -> Provider | None:
    """Create a provider based on configuration.

    Reads ``config.llm.choice`` and builds the matching provider. Missing
    configuration yields None rather than an exception; the caller decides
    how to report it.

    Args:
        config: daemoncodex configuration
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        A configured provider, or None
    """
    env = os.environ if env is None else env
    choice = LLMChoice(config.llm.choice)

    if choice == LLMChoice.REMOTE:
        api_key = _resolve_key(config.openai.api_key, config.openai.api_key_env, env)
        if not api_key:
            logger.warning("OpenAI API key not found in config or %s", config.openai.api_key_env)
            return None
        return create_openai_provider(
            api_key, config.openai.model, timeout_ms=config.openai.timeout * 1000
        )

    elif choice == LLMChoice.CUSTOM:
        custom_id = config.local.active_custom_id
        custom = next((m for m in config.local.custom_models if m.id == custom_id), None)
        if custom is None or not custom.path:
            logger.warning("No usable custom model for id %r", custom_id)
            return None
        return create_local_provider(
            Path(custom.path).expanduser(),
            provider_id=f"custom:{custom.id}",
            display_name=custom.name or custom.id,
            context_length=config.local.context_length,
        )

    elif choice in (LLMChoice.LOCAL_3B, LLMChoice.LOCAL_7B):
        env_var = LOCAL_3B_URL_ENV if choice == LLMChoice.LOCAL_3B else LOCAL_7B_URL_ENV
        url = env.get(env_var, "").strip()
        if not url:
            logger.warning("%s is not set; cannot locate the local model", env_var)
            return None
        size = "3B" if choice == LLMChoice.LOCAL_3B else "7B"
        return create_local_provider(
            model_path_from_download_url(url, config.local.models_dir),
            provider_id=f"local-{size.lower()}",
            display_name=f"Local ({size})",
            context_length=config.local.context_length,
        )

    elif choice == LLMChoice.OLLAMA_CLOUD:
        cloud = config.ollama_cloud
        if not cloud.base_url.strip() or not cloud.model.strip():
            logger.warning("Ollama Cloud needs both a base URL and a model")
            return None
        return create_ollama_cloud_provider(
            api_key=_resolve_key(cloud.api_key, cloud.api_key_env, env) or None,
            base_url=cloud.base_url,
            model=cloud.model,
            timeout_ms=cloud.timeout_ms,
            max_retries=cloud.max_retries,
            backoff_base_ms=cloud.backoff_base_ms,
        )

    return None


def create_provider_manager(
    config: CodexConfig,
    remote_confirmed: bool = False,
    env: Mapping[str, str] | None = None,
    audit_logger: ProviderAuditLogger | None = None,
) -> ProviderManager:
    """Build a manager with the configured provider registered.

    Remote mode from the config is only applied when the caller confirms
    it. The provider is activated if the privacy mode allows it.

    Args:
        config: daemoncodex configuration
        remote_confirmed: Whether the user confirmed remote inference
        env: Environment mapping (defaults to ``os.environ``)
        audit_logger: Audit logger passed to the manager

    Returns:
        ProviderManager, possibly with no active provider
    """
    manager = ProviderManager(audit_logger=audit_logger)

    if config.privacy.mode == PrivacyMode.REMOTE_ALLOWED.value:
        manager.set_privacy_mode(PrivacyMode.REMOTE_ALLOWED, confirmed=remote_confirmed)

    provider = create_provider(config, env=env)
    if provider is None:
        return manager

    manager.register(provider)
    manager.set_active(provider.id)
    return manager
