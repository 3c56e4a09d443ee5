"""OpenRouter gateway using the OpenAI-compatible chat-completion API."""

from typing import TYPE_CHECKING

import httpx
import openai
from openai import AsyncOpenAI

from archivr.config.constants import (
    APP_TITLE,
    DEFAULT_APP_URL,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    OPENROUTER_BASE_URL,
)
from archivr.exceptions import (
    PaymentRequiredError,
    ProviderError,
    RateLimitedError,
    TransportError,
    UnauthorizedError,
    UnknownProviderError,
)
from archivr.llm.base import BaseGateway, LLMMessage, LLMResponse, TokenUsage
from archivr.utils.logging import get_logger

if TYPE_CHECKING:
    from archivr.config.settings import OpenRouterConfig

log = get_logger(__name__)


def classify_status(status: int, body: str) -> ProviderError:
    """Map a non-2xx HTTP status onto the provider error taxonomy.

    Args:
        status: HTTP status code
        body: Response body text, kept in the detail of unclassified errors

    Returns:
        The error to raise
    """
    detail = f"OpenRouter API error ({status}): {body}"
    if status == 429:
        return RateLimitedError(detail)
    if status == 401:
        return UnauthorizedError(detail)
    if status == 402:
        return PaymentRequiredError(detail)
    return UnknownProviderError(detail, status=status)


class OpenRouterGateway(BaseGateway):
    """Single-shot chat completions against OpenRouter.

    One ``AsyncOpenAI`` client is kept per credential. SDK-level retries are
    disabled; the orchestrators own every retry decision.
    """

    name = "openrouter"

    def __init__(
        self,
        base_url: str = OPENROUTER_BASE_URL,
        timeout: int = DEFAULT_LLM_TIMEOUT,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        app_url: str = DEFAULT_APP_URL,
        app_title: str = APP_TITLE,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: API root, e.g. https://openrouter.ai/api/v1
            timeout: Network timeout in seconds
            temperature: Sampling temperature sent with every request
            max_tokens: Completion token limit sent with every request
            app_url: Attribution URL sent as ``HTTP-Referer``
            app_title: Attribution title sent as ``X-Title``
            http_client: Optional pre-built httpx client (tests, proxies)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.default_headers = {"HTTP-Referer": app_url, "X-Title": app_title}
        self._http_client = http_client
        self._clients: dict[str, AsyncOpenAI] = {}

    @classmethod
    def from_config(
        cls, config: "OpenRouterConfig", http_client: httpx.AsyncClient | None = None
    ) -> "OpenRouterGateway":
        """Create a gateway from the ``openrouter`` settings section."""
        return cls(
            base_url=config.base_url,
            timeout=config.timeout,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            app_url=config.app_url,
            app_title=config.app_title,
            http_client=http_client,
        )

    def _client_for(self, credential: str) -> AsyncOpenAI:
        client = self._clients.get(credential)
        if client is None:
            client = AsyncOpenAI(
                api_key=credential,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                default_headers=self.default_headers,
                http_client=self._http_client,
            )
            self._clients[credential] = client
        return client

    async def complete(
        self,
        messages: list[LLMMessage],
        model: str,
        credential: str,
    ) -> LLMResponse:
        """Generate a completion using the OpenRouter API.

        Raises:
            RateLimitedError: On 429
            UnauthorizedError: On 401
            PaymentRequiredError: On 402
            UnknownProviderError: On any other non-2xx status
            TransportError: On connection failures or an empty completion
        """
        client = self._client_for(credential)
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[m.to_dict() for m in messages],  # type: ignore[misc]
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            log.debug("OpenRouter returned error status", model=model, status=e.status_code)
            raise classify_status(e.status_code, e.response.text) from e
        except openai.APIConnectionError as e:
            log.debug("OpenRouter connection failed", model=model, error=str(e))
            raise TransportError(f"OpenRouter connection error: {e}") from e
        except openai.APIError as e:
            raise TransportError(f"OpenRouter response error: {e}") from e

        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not content:
            raise TransportError("no content in response")

        usage = None
        if getattr(response, "usage", None):
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
            )

        log.debug(
            "OpenRouter completion",
            model=getattr(response, "model", None) or model,
            tokens=usage.total_tokens if usage else 0,
        )

        return LLMResponse(
            content=content,
            model=getattr(response, "model", None) or model,
            usage=usage,
            finish_reason=getattr(choices[0], "finish_reason", None) or "unknown",
        )

    async def aclose(self) -> None:
        """Close every cached client."""
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
