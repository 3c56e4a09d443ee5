"""Config command for configuration management."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from archivr.cli.context import load_settings
from archivr.core.credentials import SettingsCredentialStore
from archivr.exceptions import ConfigurationError

config_app = typer.Typer(help="Configuration management.")
console = Console()


def mask_key(key: str | None) -> str:
    """Show only the last 4 characters of a key."""
    if not key:
        return "[red]not set[/red]"
    if len(key) <= 8:
        return "***"
    return f"***{key[-4:]}"


@config_app.command("show")
def show() -> None:
    """Show current configuration."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Directory", settings.log_dir)

    table.add_row("API Base URL", settings.openrouter.base_url)
    table.add_row("API Key", mask_key(SettingsCredentialStore(settings.openrouter).get()))
    table.add_row("Timeout", f"{settings.openrouter.timeout}s")
    table.add_row("Temperature", str(settings.openrouter.temperature))
    table.add_row("Max Tokens", str(settings.openrouter.max_tokens))

    table.add_row("Free Models", "\n".join(settings.models.free) or "None configured")
    table.add_row("Paid Models", "\n".join(settings.models.paid) or "None configured")

    pacing = settings.batch
    table.add_row("Courtesy Delay", f"{pacing.courtesy_delay:g}s")
    table.add_row(
        "Failure Backoff",
        f"{pacing.failure_backoff:g}s x failures, "
        f"{pacing.cooldown:g}s cooldown after {pacing.failure_threshold}",
    )
    table.add_row(
        "Retry Pass",
        f"after {pacing.retry_settle_delay:g}s, {pacing.retry_spacing:g}s apart",
    )

    console.print(table)
    console.print()
