"""Tagging execution context - holds initialized services for commands."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from rich.console import Console

from archivr.config import get_settings
from archivr.core.batch import BatchOrchestrator
from archivr.core.credentials import SettingsCredentialStore
from archivr.core.events import Event, EventChannel, EventKind
from archivr.core.state import ModelTiers
from archivr.core.tagger import TaggingService
from archivr.exceptions import ConfigurationError
from archivr.llm.openrouter import OpenRouterGateway
from archivr.utils.logging import get_logger, setup_task_logging

if TYPE_CHECKING:
    from archivr.config.settings import ArchivrSettings

log = get_logger(__name__)

_EVENT_STYLES = {
    EventKind.INFO: "blue",
    EventKind.SUCCESS: "green",
    EventKind.ERROR: "red",
    EventKind.PROGRESS: "magenta",
}


@dataclass
class TaggingContext:
    """Everything a command needs to talk to the models.

    Wires settings, logging, the gateway, the credential store and both
    orchestrators together, and prints events to the console as they arrive.
    """

    settings: "ArchivrSettings"
    task_id: str
    log_path: Path
    gateway: OpenRouterGateway
    tagger: TaggingService
    batch: BatchOrchestrator
    events: EventChannel
    console: Console = field(default_factory=Console)

    @classmethod
    def create(
        cls,
        command_prefix: str = "task",
        verbose: bool = False,
        console: Console | None = None,
    ) -> "TaggingContext":
        """Load settings, set up task logging and build the services.

        Raises:
            ConfigurationError: If the settings sources fail validation
        """
        settings = load_settings()
        console = console or Console()

        task_id, log_path = setup_task_logging(
            log_dir=settings.log_dir,
            prefix=command_prefix,
            verbose=verbose,
        )
        if verbose:
            log.info("Logs will be saved to", log_file=str(log_path))
        log.info("Task configuration", task_id=task_id, config=mask_config(settings.model_dump()))

        # Printed as emitted, so nothing is kept for drain()
        events = EventChannel(
            listeners=[lambda event: print_event(console, event)], buffered=False
        )

        gateway = OpenRouterGateway.from_config(settings.openrouter)
        tagger = TaggingService(
            gateway=gateway,
            credentials=SettingsCredentialStore(settings.openrouter),
            tiers=ModelTiers.from_config(settings.models),
            events=events,
        )
        batch = BatchOrchestrator(tagger, config=settings.batch, events=events)

        return cls(
            settings=settings,
            task_id=task_id,
            log_path=log_path,
            gateway=gateway,
            tagger=tagger,
            batch=batch,
            events=events,
            console=console,
        )


def print_event(console: Console, event: Event) -> None:
    style = _EVENT_STYLES.get(event.kind, "white")
    console.print(f"[{style}]{event.kind.value}[/{style}] {event.message}")


def mask_config(config_dump: dict) -> dict:
    """Mask sensitive information in a settings dump."""
    openrouter = config_dump.get("openrouter") or {}
    if openrouter.get("api_key"):
        openrouter["api_key"] = "***"
    return config_dump


def load_settings() -> "ArchivrSettings":
    """Return the cached settings, reporting validation failures as ConfigurationError."""
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
