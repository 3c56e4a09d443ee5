"""Sequential batch tagging with backoff and a single bulk retry pass."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from archivr.config.settings import BatchConfig
from archivr.core.credentials import has_credential
from archivr.core.events import EventChannel, EventKind
from archivr.core.state import (
    BatchItem,
    BatchOutcome,
    BatchPhase,
    BatchRun,
    BatchStatus,
)
from archivr.core.tagger import TaggingService
from archivr.exceptions import NoCredentialError, OrchestratorError, ProviderError
from archivr.llm.types import AnalysisResult
from archivr.utils.logging import get_logger

log = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]
ApplyResult = Callable[[str, AnalysisResult], Awaitable[None] | None]


class BatchOrchestrator:
    """Tags a list of posts one at a time.

    Items are never processed concurrently: provider calls are paced with a
    courtesy delay, consecutive failures back off linearly and trip a long
    cooldown at ``failure_threshold``. Credential errors abort the whole run.
    Items that failed for any other reason get exactly one more attempt after
    the main pass.
    """

    def __init__(
        self,
        tagger: TaggingService,
        config: BatchConfig | None = None,
        events: EventChannel | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            tagger: Single-item orchestrator used for every post
            config: Pacing configuration (defaults from ``BatchConfig``)
            events: Event channel; defaults to the tagger's channel
            sleep: Awaitable delay function, injectable for tests
        """
        self.tagger = tagger
        self.config = config or BatchConfig()
        self.events = events if events is not None else tagger.events
        self._sleep = sleep

    async def analyze_batch(
        self,
        items: Sequence[BatchItem],
        apply_result: ApplyResult,
    ) -> BatchOutcome:
        """Tag every item and hand each result to ``apply_result``.

        Args:
            items: Posts to tag, processed in order; ids must be unique
            apply_result: Called with ``(item_id, result)`` for each success,
                may be sync or async. If it raises, the item counts as failed
                and is retried once like any other recoverable failure

        Returns:
            Final counts and the ids left unresolved

        Raises:
            TypeError: If ``items`` is None
            ValueError: If item ids are not unique
        """
        if items is None:
            raise TypeError("items must be a sequence of BatchItem, not None")
        items = list(items)
        if len({item.id for item in items}) != len(items):
            raise ValueError("Batch item ids must be unique")

        run = BatchRun(total=len(items))

        if not items:
            run.transition(BatchPhase.FINISHED)
            self.events.emit(EventKind.INFO, "All posts are already analyzed!")
            return self._outcome(run, items)

        if not has_credential(self.tagger.credentials):
            self._abort(run, NoCredentialError())
            return self._outcome(run, items)

        run.transition(BatchPhase.RUNNING)
        self.events.emit(EventKind.INFO, f"Analyzing {run.total} posts...", total=run.total)
        log.info("Batch started", total=run.total)

        await self._main_pass(run, items, apply_result)

        if not run.stopped and run.failed_items:
            await self._retry_pass(run, apply_result)

        if not run.stopped:
            run.transition(BatchPhase.FINISHED)

        outcome = self._outcome(run, items)
        self._report(outcome)
        return outcome

    async def _main_pass(
        self, run: BatchRun, items: list[BatchItem], apply_result: ApplyResult
    ) -> None:
        last_index = len(items) - 1
        for index, item in enumerate(items):
            error = await self._attempt(run, item, apply_result)
            if run.stopped:
                return

            if error is None:
                run.record_success(item)
                if run.processed % self.config.progress_every == 0:
                    self.events.emit(
                        EventKind.PROGRESS,
                        f"Analyzed {run.processed} of {run.total} posts...",
                        processed=run.processed,
                        total=run.total,
                    )
                if index < last_index:
                    await self._sleep(self.config.courtesy_delay)
                continue

            run.record_failure(item)
            log.warning(
                "Item failed, will retry after main pass",
                item_id=item.id,
                error=type(error).__name__,
                consecutive_failures=run.consecutive_failures,
            )
            if index < last_index:
                await self._back_off(run)

    async def _back_off(self, run: BatchRun) -> None:
        if run.consecutive_failures >= self.config.failure_threshold:
            log.info("Failure threshold reached, cooling down", seconds=self.config.cooldown)
            self.events.emit(
                EventKind.INFO,
                f"Hit rate limits, pausing {self.config.cooldown:g}s before continuing...",
            )
            await self._sleep(self.config.cooldown)
            run.consecutive_failures = 0
        else:
            await self._sleep(self.config.failure_backoff * run.consecutive_failures)

    async def _retry_pass(self, run: BatchRun, apply_result: ApplyResult) -> None:
        run.transition(BatchPhase.RETRYING)
        run.retry_attempted = True
        pending = list(run.failed_items.values())
        self.events.emit(
            EventKind.INFO,
            f"Retrying {len(pending)} failed posts...",
            failed=len(pending),
        )
        log.info("Retry pass started", failed=len(pending))

        await self._sleep(self.config.retry_settle_delay)
        for index, item in enumerate(pending):
            if index > 0:
                await self._sleep(self.config.retry_spacing)
            error = await self._attempt(run, item, apply_result)
            if run.stopped:
                return
            if error is None:
                run.record_success(item)
            else:
                log.warning("Item failed on retry, giving up", item_id=item.id)

    async def _attempt(
        self, run: BatchRun, item: BatchItem, apply_result: ApplyResult
    ) -> Exception | None:
        """Tag one item; returns the recoverable error, or None on success.

        Fatal errors abort ``run`` instead of being returned.
        """
        try:
            result = await self.tagger.analyze_one(item.request)
        except OrchestratorError as e:
            if e.fatal:
                self._abort(run, e)
            return e
        except ProviderError as e:
            log.warning(
                "Provider error",
                item_id=item.id,
                kind=e.kind.value,
                status=e.status,
                detail=e.detail,
            )
            return e

        try:
            applied = apply_result(item.id, result)
            if inspect.isawaitable(applied):
                await applied
        except Exception as e:
            log.exception("Applying result failed", item_id=item.id)
            return e
        return None

    def _abort(self, run: BatchRun, error: OrchestratorError) -> None:
        run.error = error
        run.transition(BatchPhase.ABORTED)
        log.error("Batch aborted", code=error.code, processed=run.processed)
        self.events.emit(EventKind.ERROR, error.user_message, code=error.code)

    def _outcome(self, run: BatchRun, items: list[BatchItem]) -> BatchOutcome:
        unvisited = [item.id for item in items[run.visited :]]
        remaining = (*run.failed_items.keys(), *unvisited)

        if run.phase is BatchPhase.ABORTED:
            status = BatchStatus.ABORTED
        elif run.total == 0:
            status = BatchStatus.EMPTY
        elif run.processed == 0:
            status = BatchStatus.NOTHING_PROCESSED
        elif remaining:
            status = BatchStatus.PARTIAL
        else:
            status = BatchStatus.COMPLETED

        return BatchOutcome(
            status=status,
            phase=run.phase,
            total=run.total,
            processed_count=run.processed,
            remaining_items=remaining,
            failed_items=tuple(run.failed_items.keys()),
            error=run.error,
            retried=run.retry_attempted,
        )

    def _report(self, outcome: BatchOutcome) -> None:
        log.info(
            "Batch finished",
            status=outcome.status.value,
            processed=outcome.processed_count,
            remaining=outcome.remaining_count,
        )
        if outcome.status is BatchStatus.COMPLETED:
            self.events.emit(
                EventKind.SUCCESS,
                f"Done! Analyzed {outcome.processed_count} posts.",
                processed=outcome.processed_count,
            )
        elif outcome.status is BatchStatus.PARTIAL:
            self.events.emit(
                EventKind.INFO,
                f"Analyzed {outcome.processed_count} of {outcome.total} posts. "
                f"{outcome.remaining_count} couldn't be tagged, try again later.",
                processed=outcome.processed_count,
                remaining=outcome.remaining_count,
            )
        elif outcome.status is BatchStatus.NOTHING_PROCESSED:
            self.events.emit(
                EventKind.ERROR,
                "Couldn't analyze any posts. AI models may be rate-limited, "
                "try again later or add credits to your OpenRouter account.",
                remaining=outcome.remaining_count,
            )
