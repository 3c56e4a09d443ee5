"""Custom exceptions for Archivr."""

from enum import Enum


class ArchivrError(Exception):
    """Base exception class for Archivr."""

    pass


class ConfigurationError(ArchivrError):
    """Configuration error."""

    pass


class ProviderErrorKind(str, Enum):
    """Closed set of failure kinds reported by a provider gateway."""

    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    PAYMENT_REQUIRED = "payment_required"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class ProviderError(ArchivrError):
    """A single provider call failed.

    Attributes:
        kind: Failure kind the orchestrators dispatch on
        status: HTTP status code, if the provider answered at all
        detail: Human readable detail (never contains credentials)
    """

    kind: ProviderErrorKind = ProviderErrorKind.UNKNOWN

    def __init__(self, detail: str = "", status: int | None = None) -> None:
        self.detail = detail
        self.status = status
        super().__init__(detail or self.kind.value)


class RateLimitedError(ProviderError):
    """Provider answered 429."""

    kind = ProviderErrorKind.RATE_LIMITED

    def __init__(self, detail: str = "Rate limited", status: int | None = 429) -> None:
        super().__init__(detail, status)


class UnauthorizedError(ProviderError):
    """Provider rejected the credential (401)."""

    kind = ProviderErrorKind.UNAUTHORIZED

    def __init__(self, detail: str = "Unauthorized", status: int | None = 401) -> None:
        super().__init__(detail, status)


class PaymentRequiredError(ProviderError):
    """Account has no credits for the requested model (402)."""

    kind = ProviderErrorKind.PAYMENT_REQUIRED

    def __init__(self, detail: str = "Payment required", status: int | None = 402) -> None:
        super().__init__(detail, status)


class TransportError(ProviderError):
    """Connection failed or the response carried no usable completion."""

    kind = ProviderErrorKind.TRANSPORT


class UnknownProviderError(ProviderError):
    """Any other non-2xx response. Keeps the original status in ``status`` and ``detail``."""

    kind = ProviderErrorKind.UNKNOWN


class OrchestratorError(ArchivrError):
    """Error surfaced by the tagging orchestrators to their caller.

    Attributes:
        code: Stable machine readable code
        user_message: Message suitable for showing to the end user
        fatal: True if a batch must stop when this error occurs
    """

    code: str = "AI_ERROR"
    user_message: str = "AI analysis failed. Check your API key in Settings."
    fatal: bool = False

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class NoCredentialError(OrchestratorError):
    """No API key is configured."""

    code = "NO_API_KEY"
    user_message = "Please add your OpenRouter API key in Settings to use AI features."
    fatal = True


class InvalidCredentialError(OrchestratorError):
    """The configured API key was rejected by the provider."""

    code = "INVALID_KEY"
    user_message = "Your API key is invalid. Please check it in Settings."
    fatal = True


class NoCreditsError(OrchestratorError):
    """Paid tier was reached but the account has no credits."""

    code = "NO_CREDITS"
    user_message = (
        "No credits on your OpenRouter account. "
        "Add $1-5 at openrouter.ai/credits for premium AI."
    )


class AllModelsFailedError(OrchestratorError):
    """Every model in every tier failed for one item."""

    code = "ALL_MODELS_FAILED"
    user_message = (
        "All AI models are currently unavailable. "
        "Try again later or add credits to your OpenRouter account."
    )
