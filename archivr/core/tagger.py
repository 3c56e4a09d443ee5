"""Single-item tagging with ordered fallback across free and paid models."""

from collections.abc import Mapping, Sequence

from archivr.core.credentials import CredentialStore
from archivr.core.events import EventChannel, EventKind
from archivr.core.state import ModelTiers
from archivr.exceptions import (
    AllModelsFailedError,
    InvalidCredentialError,
    NoCredentialError,
    NoCreditsError,
    PaymentRequiredError,
    RateLimitedError,
    UnauthorizedError,
)
from archivr.llm.base import BaseGateway
from archivr.llm.decoder import (
    decode_analysis,
    decode_collection_suggestions,
    decode_search_intent,
)
from archivr.llm.prompts import (
    build_collection_suggestion_prompt,
    build_search_prompt,
    build_tagging_prompt,
)
from archivr.llm.types import AnalysisRequest, AnalysisResult, CollectionSuggestion, SearchIntent
from archivr.utils.logging import get_logger

log = get_logger(__name__)

TIER_ESCALATION_MESSAGE = "Free AI models are busy, trying premium models..."


class TaggingService:
    """Drives one prompt through the model tiers.

    Free models are tried in order; a rate-limited free model falls through
    silently to the next one. Only when the last free model is rate-limited
    does the run escalate to the paid tier, announced with an INFO event.
    The first successful completion wins.
    """

    def __init__(
        self,
        gateway: BaseGateway,
        credentials: CredentialStore,
        tiers: ModelTiers,
        events: EventChannel | None = None,
    ) -> None:
        self.gateway = gateway
        self.credentials = credentials
        self.tiers = tiers
        self.events = events if events is not None else EventChannel()

    async def analyze_one(self, request: AnalysisRequest) -> AnalysisResult:
        """Tag a single post.

        Args:
            request: URL and optional caption of the post

        Returns:
            Decoded tags, or the fallback result if the model output was unusable

        Raises:
            NoCredentialError: No API key configured (no network call is made)
            InvalidCredentialError: The provider rejected the key
            NoCreditsError: The paid tier was reached without credits
            AllModelsFailedError: Every model was rate-limited
            ProviderError: Any other provider failure, unchanged
        """
        prompt = build_tagging_prompt(request.url, request.caption)
        raw = await self.complete(prompt)
        return decode_analysis(raw)

    async def suggest_collections(
        self, tag_counts: Mapping[str, int]
    ) -> list[CollectionSuggestion]:
        """Ask for 3-5 collections grouping the most used tags."""
        if not tag_counts:
            return []
        raw = await self.complete(build_collection_suggestion_prompt(tag_counts))
        return decode_collection_suggestions(raw)

    async def interpret_search(self, query: str, available_tags: Sequence[str]) -> SearchIntent:
        """Map a free-text query onto existing tags and keywords."""
        raw = await self.complete(build_search_prompt(query, available_tags))
        return decode_search_intent(raw)

    async def complete(self, prompt: str) -> str:
        """Return raw completion text from the first model that answers."""
        credential = self.credentials.get()
        if not credential:
            raise NoCredentialError()

        free = self.tiers.free
        for index, model in enumerate(free):
            try:
                log.debug("Trying free model", model=model)
                return await self.gateway.send(prompt, model, credential)
            except RateLimitedError:
                if index < len(free) - 1:
                    log.debug("Free model rate-limited, trying next", model=model)
                    continue
                log.info("Free tier exhausted, escalating to paid tier", model=model)
                self.events.emit(EventKind.INFO, TIER_ESCALATION_MESSAGE)
            except UnauthorizedError as e:
                raise InvalidCredentialError() from e

        for model in self.tiers.paid:
            try:
                log.debug("Trying paid model", model=model)
                return await self.gateway.send(prompt, model, credential)
            except RateLimitedError:
                log.debug("Paid model rate-limited, trying next", model=model)
                continue
            except PaymentRequiredError as e:
                raise NoCreditsError() from e
            except UnauthorizedError as e:
                raise InvalidCredentialError() from e

        log.warning(
            "All models failed",
            free_models=len(free),
            paid_models=len(self.tiers.paid),
        )
        raise AllModelsFailedError()
