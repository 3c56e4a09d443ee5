"""Analyze command for tagging a single post."""

import asyncio
import json
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from archivr.cli.context import TaggingContext
from archivr.exceptions import ConfigurationError, OrchestratorError, ProviderError
from archivr.llm.types import AnalysisRequest, AnalysisResult
from archivr.utils.logging import get_console, get_logger

console = get_console()
log = get_logger(__name__)


def analyze(
    url: Annotated[str, typer.Argument(help="URL of the post to tag.")],
    caption: Annotated[
        str | None,
        typer.Option("--caption", "-c", help="Post caption, improves tag quality."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logs on the console."),
    ] = False,
) -> None:
    """Tag a single post with the first model that answers."""
    if not url.strip():
        raise typer.BadParameter("URL must not be empty", param_hint="URL")

    try:
        ctx = TaggingContext.create(command_prefix="analyze", verbose=verbose, console=console)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    request = AnalysisRequest(url=url.strip(), caption=caption)

    try:
        result = asyncio.run(_analyze(ctx, request))
    except OrchestratorError as e:
        console.print(f"[red]Error:[/red] {e.user_message}")
        raise typer.Exit(1) from e
    except ProviderError as e:
        log.error("Analysis failed", kind=e.kind.value, status=e.status)
        console.print(f"[red]Error:[/red] AI analysis failed: {escape(e.detail or e.kind.value)}")
        raise typer.Exit(1) from e

    if as_json:
        typer.echo(json.dumps(result.model_dump(by_alias=True), ensure_ascii=False))
    else:
        _display_result(request.url, result)


async def _analyze(ctx: TaggingContext, request: AnalysisRequest) -> AnalysisResult:
    try:
        return await ctx.tagger.analyze_one(request)
    finally:
        await ctx.gateway.aclose()


def _display_result(url: str, result: AnalysisResult) -> None:
    table = Table(title=url, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Tags", ", ".join(result.tags))
    table.add_row("Collection", result.suggested_collection or "-")
    table.add_row("Mood", result.mood or "-")
    table.add_row("Confidence", f"{result.confidence:.2f}")
    console.print(table)
    if result.is_fallback:
        console.print("[yellow]The model answer could not be parsed; fallback tags used.[/yellow]")
