"""Doctor command - provider health check."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from daemoncodex.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from daemoncodex.providers.base import HealthStatus
from daemoncodex.providers.factory import create_provider

console = Console()

STATUS_MARKS = {
    HealthStatus.HEALTHY: "[green]✓[/green]",
    HealthStatus.DEGRADED: "[yellow]⚠[/yellow]",
    HealthStatus.UNAVAILABLE: "[red]✗[/red]",
    HealthStatus.NOT_CONFIGURED: "[yellow]⚠[/yellow]",
}


def doctor_command(config_path: str | None = None) -> None:
    """Run provider health checks."""
    console.print(
        Panel.fit(
            "[bold blue]daemoncodex provider check[/bold blue]\nChecking your configuration...",
            border_style="blue",
        )
    )

    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    try:
        config = load_config(path)
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Provider Health", show_header=True, header_style="bold cyan")
    table.add_column("Check", style="white", width=24)
    table.add_column("Status", width=8)
    table.add_column("Details", style="dim")

    if path.exists():
        table.add_row("Configuration", "[green]✓[/green]", str(path))
    else:
        table.add_row("Configuration", "[yellow]⚠[/yellow]", "Not found (using defaults)")

    table.add_row("Privacy mode", "[green]✓[/green]", str(config.privacy.mode))

    provider = create_provider(config)
    if provider is None:
        table.add_row("Provider", "[red]✗[/red]", f"Not configured (choice: {config.llm.choice})")
        console.print(table)
        console.print("[yellow]Set llm.choice and the matching settings in your config.[/yellow]")
        raise typer.Exit(code=1)

    health = provider.health_check()
    table.add_row("Provider", "[green]✓[/green]", f"{provider.display_name} ({provider.id})")
    table.add_row(
        "Network",
        "[yellow]⚠[/yellow]" if provider.requires_network else "[green]✓[/green]",
        "Remote (data leaves this device)" if provider.requires_network else "On-device",
    )
    configured = provider.is_configured()
    table.add_row(
        "Configured",
        "[green]✓[/green]" if configured else "[red]✗[/red]",
        "yes" if configured else "missing settings",
    )
    table.add_row("Health", STATUS_MARKS[health], health.value)

    models = provider.list_models()
    if models:
        model_list = ", ".join(m.id for m in models[:3])
        if len(models) > 3:
            model_list += f" (+{len(models) - 3} more)"
        table.add_row("Models", "[green]✓[/green]", model_list)
    else:
        table.add_row("Models", "[yellow]⚠[/yellow]", "No models found")

    console.print(table)

    if health != HealthStatus.HEALTHY:
        raise typer.Exit(code=1)
