"""Main CLI application using Typer."""

import logging

import typer
from rich.console import Console

from daemoncodex import __version__

app = typer.Typer(
    name="daemoncodex",
    help="Daemon Codex - privacy-first inference routing for file organization",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Daemon Codex command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version():
    """Show daemoncodex version."""
    console.print(f"daemoncodex version {__version__}")


@app.command()
def doctor(
    config_path: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ~/.daemoncodex/daemoncodex.yaml)",
    ),
):
    """Check the configured provider's readiness."""
    from daemoncodex.cli.doctor import doctor_command

    doctor_command(config_path=config_path)


@app.command()
def categorize(
    name: str = typer.Argument(..., help="File or directory name"),
    path: str = typer.Option("", "--path", "-p", help="Full path to the item"),
    is_directory: bool = typer.Option(False, "--dir", help="Item is a directory"),
    context: str = typer.Option("", "--context", help="Earlier categorizations to stay consistent with"),
    allow_remote: bool = typer.Option(
        False,
        "--allow-remote",
        help="Confirm that requests may be sent to a remote provider",
    ),
    upload: bool = typer.Option(
        False,
        "--upload",
        help="Allow the full path to be sent to a remote provider",
    ),
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Categorize a file or directory with the configured provider."""
    from daemoncodex.cli.categorize import categorize_command

    categorize_command(
        name=name,
        path=path,
        is_directory=is_directory,
        consistency_context=context,
        allow_remote=allow_remote,
        allow_upload=upload,
        config_path=config_path,
    )


if __name__ == "__main__":
    app()
