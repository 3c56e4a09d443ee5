"""Entry point for ``python -m archivr``."""

from archivr.cli.main import app

app()
