"""Base classes for provider gateways."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class TokenUsage:
    """Token usage information."""

    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        """Total tokens used."""
        return self.prompt_tokens + self.completion_tokens


@dataclass
class LLMMessage:
    """A message in a conversation."""

    role: str  # "system", "user", "assistant"
    content: str

    @classmethod
    def user(cls, content: str) -> "LLMMessage":
        """Create a user message."""
        return cls(role="user", content=content)

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass
class LLMResponse:
    """Raw completion returned by a gateway."""

    content: str
    model: str
    usage: TokenUsage | None = None
    finish_reason: str = "unknown"


class BaseGateway(ABC):
    """Sends one prompt to one model with one credential.

    Gateways never retry. Failures are raised as
    :class:`~archivr.exceptions.ProviderError` subclasses so callers can
    dispatch on the error kind; all retry and fallback policy lives in the
    orchestrators.
    """

    name: str = "base"

    @abstractmethod
    async def complete(
        self,
        messages: list[LLMMessage],
        model: str,
        credential: str,
    ) -> LLMResponse:
        """Run a chat completion.

        Args:
            messages: Conversation to send
            model: Provider model identifier
            credential: API key, attached as a bearer token

        Returns:
            The completion

        Raises:
            ProviderError: On any failure
        """
        ...

    async def send(self, prompt: str, model: str, credential: str) -> str:
        """Send a single user prompt and return the raw completion text."""
        response = await self.complete([LLMMessage.user(prompt)], model, credential)
        return response.content

    async def aclose(self) -> None:
        """Release network resources."""
        return None
