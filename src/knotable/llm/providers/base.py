"""Abstract LLM provider interface and vendor error classification."""

import abc
import asyncio
import time

import structlog

from knotable.llm.errors import (
    InvalidCredentialsError,
    ModelNotFoundError,
    ProviderError,
    ProviderNetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
)
from knotable.llm.schemas import GenerationParams, ProviderReply

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 60.0

# Google APIs report a gRPC-style status string next to the HTTP code.
_CREDENTIAL_STATUSES = frozenset({"UNAUTHENTICATED", "PERMISSION_DENIED"})
_QUOTA_STATUSES = frozenset({"RESOURCE_EXHAUSTED"})
_NOT_FOUND_STATUSES = frozenset({"NOT_FOUND"})


class LLMProvider(abc.ABC):
    """Base class for all LLM providers.

    Subclasses implement _generate() with a single vendor SDK call.
    generate() wraps it with the timeout contract and turns every
    vendor exception into a ProviderError subclass, so callers never
    see SDK-specific exception types.

    No retries and no caching here: fallback is ProviderRouter's job.
    """

    provider_name: str = ""

    def __init__(
        self,
        default_model: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._default_model = default_model
        self._timeout_seconds = timeout_seconds

    @property
    def default_model(self) -> str:
        return self._default_model

    async def generate(self, prompt: str, params: GenerationParams) -> ProviderReply:
        """Perform exactly one round trip and normalize the reply.

        Raises:
            ProviderTimeoutError: Call exceeded the timeout.
            ProviderError: Any other vendor failure, classified.
        """
        timeout = params.timeout_seconds or self._timeout_seconds
        # adapters forward params.timeout_seconds to the SDK request
        params = params.model_copy(update={"timeout_seconds": timeout})
        try:
            return await asyncio.wait_for(
                self._generate(prompt, params),
                timeout=timeout,
            )
        except TimeoutError as exc:
            raise ProviderTimeoutError(self.provider_name, timeout) from exc
        except ProviderError:
            raise
        except Exception as exc:
            error = self._classify_error(exc, timeout)
            logger.warning(
                "llm_provider_error",
                provider=self.provider_name,
                kind=str(error.kind),
                error=error.message,
            )
            raise error from exc

    @abc.abstractmethod
    async def _generate(self, prompt: str, params: GenerationParams) -> ProviderReply:
        """Vendor-specific SDK call."""
        ...

    def _classify_error(self, exc: Exception, timeout: float) -> ProviderError:
        """Map a vendor exception onto the error taxonomy.

        Subclasses override to recognise SDK-specific timeout types
        before falling back to this duck-typed classification.
        """
        return classify_vendor_error(self.provider_name, exc)


def classify_vendor_error(provider: str, exc: Exception) -> ProviderError:
    """Classify a vendor SDK exception by status, error code and message.

    Uses duck typing (getattr) to avoid importing SDK-specific exception
    classes: anthropic/openai expose ``status_code`` and a string
    ``code``; google-genai exposes an int ``code`` and a ``status``.
    """
    message = f"{type(exc).__name__}: {exc}"

    status = getattr(exc, "status_code", None)
    raw_code = getattr(exc, "code", None)
    if not isinstance(status, int) and isinstance(raw_code, int):
        status = raw_code
    error_code = raw_code if isinstance(raw_code, str) else None
    status_name = getattr(exc, "status", None)
    if not isinstance(status_name, str):
        status_name = None

    if (
        error_code == "invalid_api_key"
        or status in (401, 403)
        or status_name in _CREDENTIAL_STATUSES
    ):
        return InvalidCredentialsError(provider, message)
    if (
        error_code == "insufficient_quota"
        or status == 429
        or status_name in _QUOTA_STATUSES
    ):
        return QuotaExceededError(provider, message)
    if (
        error_code == "model_not_found"
        or status == 404
        or status_name in _NOT_FOUND_STATUSES
    ):
        return ModelNotFoundError(provider, message)

    lowered = str(exc).lower()
    if "quota" in lowered:
        return QuotaExceededError(provider, message)
    if "api key" in lowered:
        return InvalidCredentialsError(provider, message)
    return ProviderNetworkError(provider, message)


class LatencyTimer:
    """Wall-clock latency measurement helper."""

    def __init__(self) -> None:
        self.start: float = 0
        self.elapsed_ms: int = 0

    def __enter__(self) -> "LatencyTimer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_ms = self.current_ms()

    def current_ms(self) -> int:
        return int((time.perf_counter() - self.start) * 1000)
