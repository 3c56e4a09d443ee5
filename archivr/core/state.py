"""Execution state for tagging runs.

None of this is persisted: a :class:`BatchRun` lives exactly as long as one
``analyze_batch`` call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from archivr.exceptions import OrchestratorError
from archivr.llm.types import AnalysisRequest

if TYPE_CHECKING:
    from archivr.config.settings import ModelTierConfig


@dataclass(frozen=True)
class ModelTiers:
    """Ordered model identifiers. Free models are always tried before paid ones."""

    free: tuple[str, ...] = ()
    paid: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: "ModelTierConfig") -> "ModelTiers":
        return cls(free=tuple(config.free), paid=tuple(config.paid))


@dataclass(frozen=True)
class BatchItem:
    """A post queued for tagging, identified by the caller's id."""

    id: str
    url: str
    caption: str | None = None

    @property
    def request(self) -> AnalysisRequest:
        return AnalysisRequest(url=self.url, caption=self.caption)


class BatchPhase(str, Enum):
    """Lifecycle of a batch run.

    NOT_STARTED -> RUNNING -> {ABORTED | RETRYING -> FINISHED | FINISHED}
    """

    NOT_STARTED = "not_started"
    RUNNING = "running"
    RETRYING = "retrying"
    ABORTED = "aborted"
    FINISHED = "finished"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchPhase.ABORTED, BatchPhase.FINISHED)


class BatchStatus(str, Enum):
    """How a finished run is reported to the user."""

    EMPTY = "empty"  # Nothing to do
    COMPLETED = "completed"  # Every item tagged
    PARTIAL = "partial"  # Some items left unresolved
    NOTHING_PROCESSED = "nothing_processed"  # No item could be tagged
    ABORTED = "aborted"  # Fatal credential error


_TRANSITIONS: dict[BatchPhase, set[BatchPhase]] = {
    BatchPhase.NOT_STARTED: {BatchPhase.RUNNING, BatchPhase.ABORTED, BatchPhase.FINISHED},
    BatchPhase.RUNNING: {BatchPhase.RETRYING, BatchPhase.ABORTED, BatchPhase.FINISHED},
    BatchPhase.RETRYING: {BatchPhase.ABORTED, BatchPhase.FINISHED},
    BatchPhase.ABORTED: set(),
    BatchPhase.FINISHED: set(),
}


@dataclass
class BatchRun:
    """Mutable counters for one batch.

    Items move monotonically from unvisited to processed or failed, so
    ``processed + unvisited + len(failed_items) == total`` holds throughout.
    """

    total: int
    processed: int = 0
    visited: int = 0
    consecutive_failures: int = 0
    failed_items: dict[str, BatchItem] = field(default_factory=dict)
    phase: BatchPhase = BatchPhase.NOT_STARTED
    error: OrchestratorError | None = None
    retry_attempted: bool = False

    @property
    def unvisited(self) -> int:
        return self.total - self.visited

    @property
    def stopped(self) -> bool:
        return self.phase is BatchPhase.ABORTED

    def transition(self, phase: BatchPhase) -> None:
        """Move to ``phase``, refusing transitions the lifecycle does not allow."""
        if phase not in _TRANSITIONS[self.phase]:
            raise RuntimeError(f"Invalid batch transition: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def record_success(self, item: BatchItem) -> None:
        if item.id in self.failed_items:
            del self.failed_items[item.id]
        else:
            self.visited += 1
        self.processed += 1
        self.consecutive_failures = 0

    def record_failure(self, item: BatchItem) -> None:
        self.visited += 1
        self.consecutive_failures += 1
        self.failed_items[item.id] = item

    def check_invariant(self) -> bool:
        return self.processed + self.unvisited + len(self.failed_items) == self.total


@dataclass(frozen=True)
class BatchOutcome:
    """Final report of a batch run."""

    status: BatchStatus
    phase: BatchPhase
    total: int
    processed_count: int
    remaining_items: tuple[str, ...] = ()
    failed_items: tuple[str, ...] = ()
    error: OrchestratorError | None = None
    retried: bool = False

    @property
    def remaining_count(self) -> int:
        return len(self.remaining_items)

    @property
    def aborted(self) -> bool:
        return self.phase is BatchPhase.ABORTED
