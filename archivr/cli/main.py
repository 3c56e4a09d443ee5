"""Archivr command-line entry point."""

from typing import Annotated

import typer
from dotenv import load_dotenv

from archivr import __version__
from archivr.cli.commands.analyze import analyze
from archivr.cli.commands.batch import batch
from archivr.cli.commands.config import config_app
from archivr.config.constants import APP_NAME, APP_TITLE

# OPENROUTER_API_KEY and ARCHIVR_* may live in a local .env
load_dotenv()

app = typer.Typer(
    name=APP_NAME,
    help="Tag saved posts with AI, falling back from free to paid models.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command(name="analyze", help="Tag a single post.")(analyze)
app.command(name="batch", help="Tag every post in a JSON file.")(batch)
app.add_typer(config_app, name="config")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"{APP_TITLE} {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_print_version,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Archivr - AI tagging for saved posts."""


if __name__ == "__main__":
    app()
