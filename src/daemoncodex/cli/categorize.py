"""Categorize command - run one categorization through the provider manager."""

from pathlib import Path

import typer
from rich.console import Console

from daemoncodex.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from daemoncodex.providers.factory import create_provider_manager
from daemoncodex.providers.models import LLMRequest, PrivacyMode

console = Console()


def categorize_command(
    name: str,
    path: str = "",
    is_directory: bool = False,
    consistency_context: str = "",
    allow_remote: bool = False,
    allow_upload: bool = False,
    config_path: str | None = None,
) -> None:
    """Categorize an item and print "Category : Subcategory"."""
    try:
        config = load_config(Path(config_path) if config_path else DEFAULT_CONFIG_PATH)
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e

    manager = create_provider_manager(config, remote_confirmed=allow_remote)

    request = LLMRequest(
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
        privacy_level=config.privacy.request_level,
        allow_content_upload=allow_upload or config.privacy.allow_content_upload,
    )

    reason = manager.validate_request(request)
    if reason is not None:
        console.print(f"[red]✗ {reason}[/red]")
        if config.privacy.mode == PrivacyMode.REMOTE_ALLOWED and not allow_remote:
            console.print("[yellow]Pass --allow-remote to confirm remote inference.[/yellow]")
        raise typer.Exit(code=1)

    response = manager.categorize(name, path, is_directory, consistency_context, request)
    if not response.success:
        console.print(f"[red]✗ [{response.error_code}] {response.error_message}[/red]")
        raise typer.Exit(code=1)

    console.print(response.text)
    where = "remote" if response.used_remote_inference else "local"
    console.print(
        f"[dim]{response.provider_id} / {response.model_id} ({where}, {response.latency_ms:.0f} ms)[/dim]"
    )
