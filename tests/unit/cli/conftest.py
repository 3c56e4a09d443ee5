"""Fixtures for CLI command tests."""

import io
import logging
import sys

import pytest

from archivr.cli.context import TaggingContext, print_event
from archivr.config.settings import ArchivrSettings, BatchConfig
from archivr.core.batch import BatchOrchestrator
from archivr.core.credentials import StaticCredentialStore
from archivr.core.events import EventChannel
from archivr.core.tagger import TaggingService
from archivr.utils.logging import set_log_output, setup_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep log records out of the captured CLI output."""
    set_log_output(io.StringIO())
    setup_logging(level="DEBUG", console_level="CRITICAL")
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    set_log_output(sys.stderr)


@pytest.fixture
def install_context(monkeypatch, tmp_path, tiers, test_key, sleep):
    """Replace TaggingContext.create with a context around a scripted gateway.

    Returns a function ``(gateway, credential=test_key) -> created_calls``;
    ``created_calls`` collects the keyword arguments ``create`` was called with.
    """
    monkeypatch.chdir(tmp_path)

    def _install(gateway, credential: str | None = test_key) -> list[dict]:
        events = EventChannel()
        tagger = TaggingService(gateway, StaticCredentialStore(credential), tiers, events)
        ctx = TaggingContext(
            settings=ArchivrSettings(),
            task_id="test1234",
            log_path=tmp_path / "test.log",
            gateway=gateway,
            tagger=tagger,
            batch=BatchOrchestrator(tagger, BatchConfig(), events=events, sleep=sleep),
            events=events,
        )
        created: list[dict] = []

        def fake_create(**kwargs):
            created.append(kwargs)
            console = kwargs.get("console")
            if console is not None:
                events.subscribe(lambda event: print_event(console, event))
            return ctx

        monkeypatch.setattr(TaggingContext, "create", staticmethod(fake_create))
        return created

    return _install
