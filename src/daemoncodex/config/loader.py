"""Configuration loading and validation."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from daemoncodex.config.schema import CodexConfig
from daemoncodex.providers.models import PrivacyMode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".daemoncodex" / "daemoncodex.yaml"


class ConfigError(Exception):
    """Configuration loading or validation error."""


def _resolve(path: Path | str | None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def load_config(path: Path | str | None = None) -> CodexConfig:
    """Load and validate configuration from a YAML file.

    A missing or empty file yields the defaults, which keep every request
    on the device (privacy mode ``local-only``).

    Args:
        path: Path to config file. If None, uses the default location.

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or
            fails validation (including unknown privacy modes or levels)
    """
    path = _resolve(path)

    if not path.exists():
        logger.debug("No config at %s, using local-only defaults", path)
        return CodexConfig()

    try:
        with open(path) as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config from {path}: {e}") from e

    if config_data is None:
        return CodexConfig()
    if not isinstance(config_data, dict):
        raise ConfigError(f"Configuration validation failed: {path} must contain a mapping")

    try:
        config = CodexConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e

    if config.privacy.mode == PrivacyMode.REMOTE_ALLOWED:
        logger.info(
            "Config %s allows remote providers; each session must still confirm remote use",
            path,
        )
    return config


def save_config(config: CodexConfig, path: Path | str | None = None) -> None:
    """Save configuration to a YAML file.

    Args:
        config: Configuration object to save
        path: Destination path. If None, uses the default location.
    """
    path = _resolve(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
