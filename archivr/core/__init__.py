"""Core orchestration for Archivr."""

from archivr.core.batch import BatchOrchestrator
from archivr.core.credentials import (
    CredentialStore,
    SettingsCredentialStore,
    StaticCredentialStore,
    has_credential,
)
from archivr.core.events import Event, EventChannel, EventKind
from archivr.core.state import (
    BatchItem,
    BatchOutcome,
    BatchPhase,
    BatchRun,
    BatchStatus,
    ModelTiers,
)
from archivr.core.tagger import TaggingService

__all__ = [
    "BatchItem",
    "BatchOrchestrator",
    "BatchOutcome",
    "BatchPhase",
    "BatchRun",
    "BatchStatus",
    "CredentialStore",
    "Event",
    "EventChannel",
    "EventKind",
    "ModelTiers",
    "SettingsCredentialStore",
    "StaticCredentialStore",
    "TaggingService",
    "has_credential",
]
