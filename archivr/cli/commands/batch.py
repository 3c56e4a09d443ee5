"""Batch command for tagging a list of posts."""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from pydantic import BaseModel, ValidationError, field_validator
from rich.markup import escape
from rich.table import Table

from archivr.cli.context import TaggingContext
from archivr.core.batch import ApplyResult
from archivr.core.state import BatchItem, BatchOutcome
from archivr.exceptions import ConfigurationError
from archivr.llm.types import AnalysisResult
from archivr.utils.logging import get_console, get_logger

console = get_console()
log = get_logger(__name__)


class PostEntry(BaseModel):
    """One entry of the batch input file."""

    id: str
    url: str
    caption: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("url")
    @classmethod
    def _require_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be empty")
        return value.strip()


def batch(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="JSON file with a list of {id, url, caption} objects.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write {id: result} JSON here instead of stdout.",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logs on the console."),
    ] = False,
) -> None:
    """Tag every post in INPUT_FILE one at a time."""
    items = load_items(input_file)

    try:
        ctx = TaggingContext.create(command_prefix="batch", verbose=verbose, console=console)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    results: dict[str, AnalysisResult] = {}

    def apply_result(item_id: str, result: AnalysisResult) -> None:
        results[item_id] = result

    outcome = asyncio.run(_run_batch(ctx, items, apply_result))
    log.info("Batch results collected", tagged=len(results), output=str(output or "stdout"))

    payload = {
        item_id: result.model_dump(by_alias=True) for item_id, result in results.items()
    }
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"Results written to [cyan]{output}[/cyan]")
    else:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))

    _display_summary(outcome)
    if outcome.aborted:
        raise typer.Exit(1)


def load_items(input_file: Path) -> list[BatchItem]:
    """Read and validate the batch input file.

    Raises:
        typer.BadParameter: If the file is not a JSON list of valid entries
    """
    try:
        data = json.loads(input_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"Cannot read {input_file}: {e}") from e

    if not isinstance(data, list):
        raise typer.BadParameter(f"{input_file} must contain a JSON list")

    try:
        entries = [PostEntry.model_validate(entry) for entry in data]
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid entry in {input_file}: {e}") from e

    ids = [entry.id for entry in entries]
    if len(set(ids)) != len(ids):
        raise typer.BadParameter(f"Duplicate post ids in {input_file}")

    return [BatchItem(id=e.id, url=e.url, caption=e.caption) for e in entries]


async def _run_batch(
    ctx: TaggingContext, items: list[BatchItem], apply_result: ApplyResult
) -> BatchOutcome:
    try:
        return await ctx.batch.analyze_batch(items, apply_result)
    finally:
        await ctx.gateway.aclose()


def _display_summary(outcome: BatchOutcome) -> None:
    table = Table(title="Batch Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Status", outcome.status.value)
    table.add_row("Total", str(outcome.total))
    table.add_row("Tagged", f"[green]{outcome.processed_count}[/green]")
    table.add_row("Unresolved", f"[yellow]{outcome.remaining_count}[/yellow]")
    table.add_row("Retry pass", "yes" if outcome.retried else "no")
    if outcome.error is not None:
        table.add_row("Error", f"[red]{outcome.error.code}[/red]")
    console.print(table)
