"""Error taxonomy for content generation.

Adapter-level errors (ProviderError subclasses) are raised by providers
and consumed by ProviderRouter, which turns them into a fallback attempt.
The remaining errors are fatal for the call and reach the caller as-is.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Classification of a failed provider round trip."""

    INVALID_CREDENTIALS = "invalid_credentials"
    QUOTA_EXCEEDED = "quota_exceeded"
    MODEL_NOT_FOUND = "model_not_found"
    NETWORK_OR_TIMEOUT = "network_or_timeout"


class KnotableLLMError(Exception):
    """Base class for all content-generation errors."""


# -- adapter level ------------------------------------------------------


class ProviderError(KnotableLLMError):
    """A single provider call failed.

    Attributes:
        provider: Name of the provider that failed.
        kind: Taxonomy bucket the vendor error was classified into.
    """

    kind: ErrorKind = ErrorKind.NETWORK_OR_TIMEOUT

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


class InvalidCredentialsError(ProviderError):
    kind = ErrorKind.INVALID_CREDENTIALS


class QuotaExceededError(ProviderError):
    kind = ErrorKind.QUOTA_EXCEEDED


class ModelNotFoundError(ProviderError):
    kind = ErrorKind.MODEL_NOT_FOUND


class ProviderNetworkError(ProviderError):
    """Connection failure, upstream 5xx or an unrecognised vendor error."""

    kind = ErrorKind.NETWORK_OR_TIMEOUT


class ProviderTimeoutError(ProviderNetworkError):
    """Provider did not answer within the caller-supplied timeout."""

    def __init__(self, provider: str, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(provider, f"timed out after {timeout_seconds:g}s")


# -- fatal for the call -------------------------------------------------


class UnknownProviderError(KnotableLLMError):
    """Requested provider name is not in the configured catalog."""

    def __init__(self, name: str, known: list[str] | None = None) -> None:
        self.name = name
        self.known = known or []
        suffix = f" (configured: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unknown provider: '{name}'{suffix}")


class NoProvidersAvailableError(KnotableLLMError):
    """No provider is enabled; nothing was called."""

    def __init__(self) -> None:
        super().__init__(
            "No LLM providers are available. Please check your API keys."
        )


class AllProvidersFailedError(KnotableLLMError):
    """Primary provider and its single fallback (if any) both failed.

    Attributes:
        errors: (provider, message) pairs in attempt order.
    """

    def __init__(self, errors: list[tuple[str, str]]) -> None:
        self.errors = errors
        details = "; ".join(f"{p}: {e}" for p, e in errors)
        if len(errors) == 1:
            prefix = "Primary provider failed and no fallback available"
        else:
            prefix = "All LLM providers failed"
        super().__init__(f"{prefix}: {details}")

    @property
    def providers_tried(self) -> list[str]:
        return [provider for provider, _ in self.errors]


class MalformedGenerationResponseError(KnotableLLMError):
    """Generated text holds no parseable JSON object.

    Attributes:
        raw_text: Full text returned by the provider, for diagnosis.
        reason: Why extraction failed.
    """

    def __init__(self, raw_text: str, reason: str) -> None:
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"Malformed generation response: {reason}")
