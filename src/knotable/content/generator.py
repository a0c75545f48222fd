"""ContentGenerator: campaign, quiz, objective and resource generation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple

import structlog

from knotable.content.parsing import extract_json_object
from knotable.content.prompts import (
    CampaignBrief,
    LearningParams,
    PreparedPrompt,
    build_campaign_prompt,
    build_objective_prompt,
    build_quiz_prompt,
    build_resources_prompt,
)
from knotable.llm.errors import MalformedGenerationResponseError
from knotable.llm.router import ProviderRouter
from knotable.llm.schemas import AUTO, GenerationRequest, GenerationResult

logger = structlog.get_logger()


class GeneratedContent(NamedTuple):
    """Parsed payload together with the exact prompt and call metadata.

    ``prompt.user_prompt`` is what was sent (after any override), so
    callers can show or persist it next to the content.
    """

    data: dict[str, Any]
    prompt: PreparedPrompt
    result: GenerationResult


class ContentGenerator:
    """Turns learning-design inputs into prompts and parsed LLM output.

    Each public method is two steps: build a deterministic prompt, then
    send it through ProviderRouter and extract the JSON object from the
    reply. Parse failures are not retried; the caller decides whether to
    regenerate, typically with a user-edited ``prompt_override``.

    Args:
        router: ProviderRouter used for every call.
        timeout_seconds: Per-call timeout passed to the adapters;
            None keeps the adapter default.
    """

    def __init__(
        self,
        router: ProviderRouter,
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        self._router = router
        self._timeout_seconds = timeout_seconds

    async def generate_campaign(
        self,
        brief: CampaignBrief,
        params: LearningParams | None = None,
        *,
        provider: str = AUTO,
        prompt_override: str | None = None,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> GeneratedContent:
        """Generate a milestone outline for a campaign."""
        return await self.generate_prepared(
            build_campaign_prompt(brief, params),
            provider=provider,
            prompt_override=prompt_override,
            disabled_overrides=disabled_overrides,
        )

    async def generate_quiz(
        self,
        topic: str,
        bloom_level: int,
        *,
        provider: str = AUTO,
        prompt_override: str | None = None,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> GeneratedContent:
        """Generate five quiz questions at the given Bloom level."""
        return await self.generate_prepared(
            build_quiz_prompt(topic, bloom_level),
            provider=provider,
            prompt_override=prompt_override,
            disabled_overrides=disabled_overrides,
        )

    async def generate_objective(
        self,
        topic: str,
        bloom_level: int,
        focus_areas: list[str],
        *,
        provider: str = AUTO,
        prompt_override: str | None = None,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> GeneratedContent:
        """Generate a learning objective with outcomes and criteria."""
        return await self.generate_prepared(
            build_objective_prompt(topic, bloom_level, focus_areas),
            provider=provider,
            prompt_override=prompt_override,
            disabled_overrides=disabled_overrides,
        )

    async def generate_resources(
        self,
        topic: str,
        resource_types: list[str],
        *,
        provider: str = AUTO,
        prompt_override: str | None = None,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> GeneratedContent:
        """Generate a list of external learning resources."""
        return await self.generate_prepared(
            build_resources_prompt(topic, resource_types),
            provider=provider,
            prompt_override=prompt_override,
            disabled_overrides=disabled_overrides,
        )

    async def generate_prepared(
        self,
        prepared: PreparedPrompt,
        *,
        provider: str = AUTO,
        prompt_override: str | None = None,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> GeneratedContent:
        """Send an already built prompt and parse the reply.

        Raises:
            NoProvidersAvailableError: nothing is enabled.
            UnknownProviderError: ``provider`` is not configured.
            AllProvidersFailedError: primary and fallback both failed.
            MalformedGenerationResponseError: reply holds no JSON object.
        """
        if prompt_override is not None:
            prepared = prepared._replace(user_prompt=prompt_override)

        request = GenerationRequest(
            prompt_text=prepared.user_prompt,
            system_prompt=prepared.system_prompt,
            temperature=prepared.temperature,
            max_tokens=prepared.max_tokens,
            preferred_provider=provider,
            timeout_seconds=self._timeout_seconds,
        )
        result = await self._router.generate(request, disabled_overrides)

        try:
            data = extract_json_object(result.content)
        except MalformedGenerationResponseError as exc:
            logger.error(
                "generation_parse_failed",
                kind=prepared.kind,
                provider=result.provider_used,
                reason=exc.reason,
                raw_content=result.content[:500],
            )
            raise

        logger.info(
            "content_generated",
            kind=prepared.kind,
            prompt_version=prepared.prompt_version,
            provider=result.provider_used,
            overridden=prompt_override is not None,
        )
        return GeneratedContent(data=data, prompt=prepared, result=result)
