"""ProviderRouter -- provider selection with a single bounded fallback.

Call lifecycle::

    idle -> selecting -> invoking -> succeeded
                                  -> retrying -> succeeded
                                              -> failed

At most two provider calls are made per generate(): the selected
provider and, if it fails, the first other enabled provider in
registry order. With three or more providers enabled the remaining
ones are not tried.
"""

from collections.abc import Mapping, Sequence
from enum import StrEnum

import structlog

from knotable.llm.errors import (
    AllProvidersFailedError,
    NoProvidersAvailableError,
    ProviderError,
)
from knotable.llm.providers.base import LatencyTimer, LLMProvider
from knotable.llm.registry import ProviderRegistry
from knotable.llm.schemas import (
    AUTO,
    GenerationParams,
    GenerationRequest,
    GenerationResult,
    ProviderReply,
)

logger = structlog.get_logger()

DEFAULT_PRIORITY: tuple[str, ...] = ("groq", "gemini", "openai", "anthropic")


class RouteState(StrEnum):
    """States of a single generate() call."""

    IDLE = "idle"
    SELECTING = "selecting"
    INVOKING = "invoking"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ProviderRouter:
    """Selects an enabled provider and falls back once on failure.

    Args:
        providers: Constructed adapters keyed by provider name.
        registry: Read-only provider registry.
        priority: Order used by "auto" selection. Names that are not
            configured in the registry are ignored.
    """

    def __init__(
        self,
        providers: Mapping[str, LLMProvider],
        registry: ProviderRegistry,
        priority: Sequence[str] = DEFAULT_PRIORITY,
    ) -> None:
        self._providers = dict(providers)
        self._registry = registry
        known = set(registry.names)
        ignored = [name for name in priority if name not in known]
        if ignored:
            logger.warning("provider_priority_unknown_names", ignored=ignored)
        self._priority: tuple[str, ...] = tuple(n for n in priority if n in known)

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def priority(self) -> tuple[str, ...]:
        return self._priority

    def available_providers(
        self,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> list[str]:
        """Enabled providers that have an adapter, in registry order."""
        return [
            d.name
            for d in self._registry.list_enabled_providers(disabled_overrides)
            if d.name in self._providers
        ]

    def select_provider(
        self,
        preferred: str = AUTO,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> str:
        """Pick the provider for the first attempt.

        A configured but currently disabled ``preferred`` provider falls
        back to auto selection.

        Raises:
            NoProvidersAvailableError: nothing is enabled.
            UnknownProviderError: ``preferred`` is not a configured name.
        """
        return self._select(preferred, self.available_providers(disabled_overrides))

    async def generate(
        self,
        request: GenerationRequest,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> GenerationResult:
        """Generate text with one fallback attempt.

        Raises:
            NoProvidersAvailableError: nothing is enabled; no call made.
            UnknownProviderError: preferred provider is not configured.
            AllProvidersFailedError: primary (and fallback, if any) failed.
        """
        with LatencyTimer() as timer:
            self._transition(RouteState.SELECTING, preferred=request.preferred_provider)
            candidates = self.available_providers(disabled_overrides)
            try:
                primary = self._select(request.preferred_provider, candidates)
            except Exception:
                self._transition(RouteState.FAILED)
                raise

            params = request.to_params()
            self._transition(RouteState.INVOKING, provider=primary)
            try:
                reply = await self._invoke(primary, request.prompt_text, params)
            except ProviderError as exc:
                errors = [(primary, exc.message)]
                logger.warning(
                    "llm_primary_failed",
                    provider=primary,
                    kind=str(exc.kind),
                    error=exc.message,
                )
                fallback = next((n for n in candidates if n != primary), None)
                if fallback is None:
                    self._transition(RouteState.FAILED, provider=primary)
                    raise AllProvidersFailedError(errors) from exc

                self._transition(RouteState.RETRYING, provider=fallback, failed=primary)
                try:
                    reply = await self._invoke(fallback, request.prompt_text, params)
                except ProviderError as fallback_exc:
                    errors.append((fallback, fallback_exc.message))
                    logger.warning(
                        "llm_fallback_failed",
                        provider=fallback,
                        kind=str(fallback_exc.kind),
                        error=fallback_exc.message,
                    )
                    self._transition(RouteState.FAILED, provider=fallback)
                    raise AllProvidersFailedError(errors) from fallback_exc

                return self._succeed(fallback, reply, timer, fallback_from=primary)

            return self._succeed(primary, reply, timer)

    # -- internal --------------------------------------------------------

    def _select(self, preferred: str, candidates: list[str]) -> str:
        if not candidates:
            raise NoProvidersAvailableError()

        if preferred != AUTO:
            # raises UnknownProviderError for names outside the catalog
            self._registry.describe(preferred)
            if preferred in candidates:
                return preferred
            logger.warning(
                "preferred_provider_unavailable",
                preferred=preferred,
                available=candidates,
            )

        for name in self._priority:
            if name in candidates:
                return name
        return candidates[0]

    async def _invoke(
        self,
        name: str,
        prompt: str,
        params: GenerationParams,
    ) -> ProviderReply:
        descriptor = self._registry.describe(name)
        logger.info(
            "llm_provider_selected",
            provider=name,
            display_name=descriptor.display_name,
        )
        return await self._providers[name].generate(prompt, params)

    def _succeed(
        self,
        name: str,
        reply: ProviderReply,
        timer: LatencyTimer,
        *,
        fallback_from: str | None = None,
    ) -> GenerationResult:
        descriptor = self._registry.describe(name)
        cost = (
            descriptor.estimate_cost(reply.tokens_used)
            if reply.tokens_used is not None
            else None
        )
        result = GenerationResult(
            content=reply.text,
            provider_used=name,
            model_used=reply.model,
            tokens_used=reply.tokens_used,
            estimated_cost=cost,
            elapsed_ms=timer.current_ms(),
            fallback_from=fallback_from,
        )
        self._transition(RouteState.SUCCEEDED, provider=name)
        logger.info(
            "llm_call_completed",
            provider=result.provider_used,
            model=result.model_used,
            tokens_used=result.tokens_used,
            elapsed_ms=result.elapsed_ms,
            estimated_cost=result.estimated_cost,
            fallback_from=fallback_from,
        )
        return result

    @staticmethod
    def _transition(state: RouteState, **context: object) -> None:
        logger.debug("llm_route_state", state=str(state), **context)
