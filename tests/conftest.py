"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable

import pytest

from archivr.core.credentials import StaticCredentialStore
from archivr.core.events import EventChannel
from archivr.core.state import BatchItem, ModelTiers
from archivr.core.tagger import TaggingService
from archivr.llm.base import BaseGateway, LLMMessage, LLMResponse

TEST_KEY = "sk-or-v1-0123456789abcdef"

VALID_RESULT = {
    "tags": ["recipe", "comfort-food", "cozy", "dinner-ideas"],
    "suggestedCollection": "Recipes",
    "mood": "warm",
    "confidence": 0.85,
}
VALID_JSON = json.dumps(VALID_RESULT)

Script = Callable[[str, str], "str | BaseException"]


class ScriptedGateway(BaseGateway):
    """Gateway whose answers come from a ``(prompt, model) -> text | error`` script."""

    name = "scripted"

    def __init__(self, script: Script | None = None) -> None:
        self.script = script or (lambda prompt, model: VALID_JSON)
        self.calls: list[tuple[str, str, str]] = []
        self.closed = False

    async def complete(self, messages: list[LLMMessage], model: str, credential: str) -> LLMResponse:
        prompt = messages[0].content
        self.calls.append((model, credential, prompt))
        outcome = self.script(prompt, model)
        if isinstance(outcome, BaseException):
            raise outcome
        return LLMResponse(content=outcome, model=model)

    async def aclose(self) -> None:
        self.closed = True

    @property
    def models_called(self) -> list[str]:
        return [model for model, _, _ in self.calls]


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records delays and returns immediately."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def gateway() -> ScriptedGateway:
    return ScriptedGateway()


@pytest.fixture
def tiers() -> ModelTiers:
    return ModelTiers(free=("free-a", "free-b"), paid=("paid-a", "paid-b"))


@pytest.fixture
def credentials() -> StaticCredentialStore:
    return StaticCredentialStore(TEST_KEY)


@pytest.fixture
def events() -> EventChannel:
    return EventChannel()


@pytest.fixture
def tagger(gateway, credentials, tiers, events) -> TaggingService:
    return TaggingService(gateway=gateway, credentials=credentials, tiers=tiers, events=events)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


def make_items(count: int) -> list[BatchItem]:
    """Posts ``post-1`` .. ``post-<count>``."""
    return [
        BatchItem(id=f"post-{i}", url=f"https://www.instagram.com/p/post-{i}/")
        for i in range(1, count + 1)
    ]


@pytest.fixture
def make_gateway() -> Callable[..., ScriptedGateway]:
    """Factory for gateways with a custom script."""
    return ScriptedGateway


@pytest.fixture
def items_factory() -> Callable[[int], list[BatchItem]]:
    return make_items


@pytest.fixture
def valid_json() -> str:
    return VALID_JSON


@pytest.fixture
def valid_result() -> dict:
    return dict(VALID_RESULT)


@pytest.fixture
def test_key() -> str:
    return TEST_KEY
