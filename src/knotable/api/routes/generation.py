"""Content generation API endpoints.

Routes
------
- ``POST  /prompts/{kind}``          - Preview the exact prompt (no LLM call)
- ``POST  /generate/campaign``       - Milestone outline for a campaign
- ``POST  /generate/quiz``           - Five quiz questions
- ``POST  /generate/objective``      - Learning objective
- ``POST  /generate/resources``      - External learning resources
- ``POST  /resources/discover``      - Normalized resources for a milestone
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from knotable.api.deps import (
    get_content_generator,
    get_disabled_overrides,
    get_resource_discovery,
)
from knotable.api.schemas import (
    PROMPT_REQUESTS,
    CampaignGenerateRequest,
    DiscoveredResourcesResponse,
    DiscoverResourcesRequest,
    GeneratedContentResponse,
    ObjectiveGenerateRequest,
    PromptResponse,
    QuizGenerateRequest,
    ResourcesGenerateRequest,
)
from knotable.content.generator import ContentGenerator
from knotable.content.resources import ResourceDiscovery
from knotable.llm.errors import (
    AllProvidersFailedError,
    KnotableLLMError,
    MalformedGenerationResponseError,
    NoProvidersAvailableError,
    UnknownProviderError,
)

logger = structlog.get_logger()

router = APIRouter(tags=["generation"])

GeneratorDep = Annotated[ContentGenerator, Depends(get_content_generator)]
DiscoveryDep = Annotated[ResourceDiscovery, Depends(get_resource_discovery)]
OverridesDep = Annotated[dict[str, bool], Depends(get_disabled_overrides)]


def http_error_for(exc: KnotableLLMError) -> HTTPException:
    """Map a routing/generation failure to an HTTP error."""
    if isinstance(exc, UnknownProviderError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, NoProvidersAvailableError):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, AllProvidersFailedError):
        return HTTPException(
            status_code=502,
            detail={"message": str(exc), "providers_tried": exc.providers_tried},
        )
    if isinstance(exc, MalformedGenerationResponseError):
        return HTTPException(
            status_code=502,
            detail=f"Provider response could not be parsed: {exc.reason}",
        )
    return HTTPException(status_code=500, detail="Internal server error")


@router.post("/prompts/{kind}")
async def preview_prompt(
    kind: str,
    body: Annotated[dict[str, Any], Body()],
) -> PromptResponse:
    """Return the prompt that would be sent for ``kind``.

    The body has the same shape as the matching ``/generate/{kind}``
    request. Returns 404 for an unknown kind.
    """
    request_model = PROMPT_REQUESTS.get(kind)
    if request_model is None:
        raise HTTPException(status_code=404, detail=f"Unknown prompt kind: {kind}")
    try:
        parsed = request_model.model_validate(body)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc

    prepared = parsed.prepare()
    if parsed.prompt_override is not None:
        prepared = prepared._replace(user_prompt=parsed.prompt_override)
    return PromptResponse.from_prepared(prepared)


@router.post("/generate/campaign")
async def generate_campaign(
    body: CampaignGenerateRequest,
    generator: GeneratorDep,
    overrides: OverridesDep,
) -> GeneratedContentResponse:
    """Generate a milestone outline for a campaign."""
    try:
        generated = await generator.generate_campaign(
            body.brief,
            body.params,
            provider=body.provider,
            prompt_override=body.prompt_override,
            disabled_overrides=overrides,
        )
    except KnotableLLMError as exc:
        raise http_error_for(exc) from exc
    return GeneratedContentResponse.from_generated(generated)


@router.post("/generate/quiz")
async def generate_quiz(
    body: QuizGenerateRequest,
    generator: GeneratorDep,
    overrides: OverridesDep,
) -> GeneratedContentResponse:
    """Generate five quiz questions at a Bloom level."""
    try:
        generated = await generator.generate_quiz(
            body.topic,
            body.bloom_level,
            provider=body.provider,
            prompt_override=body.prompt_override,
            disabled_overrides=overrides,
        )
    except KnotableLLMError as exc:
        raise http_error_for(exc) from exc
    return GeneratedContentResponse.from_generated(generated)


@router.post("/generate/objective")
async def generate_objective(
    body: ObjectiveGenerateRequest,
    generator: GeneratorDep,
    overrides: OverridesDep,
) -> GeneratedContentResponse:
    try:
        generated = await generator.generate_objective(
            body.topic,
            body.bloom_level,
            body.focus_areas,
            provider=body.provider,
            prompt_override=body.prompt_override,
            disabled_overrides=overrides,
        )
    except KnotableLLMError as exc:
        raise http_error_for(exc) from exc
    return GeneratedContentResponse.from_generated(generated)


@router.post("/generate/resources")
async def generate_resources(
    body: ResourcesGenerateRequest,
    generator: GeneratorDep,
    overrides: OverridesDep,
) -> GeneratedContentResponse:
    try:
        generated = await generator.generate_resources(
            body.topic,
            body.resource_types,
            provider=body.provider,
            prompt_override=body.prompt_override,
            disabled_overrides=overrides,
        )
    except KnotableLLMError as exc:
        raise http_error_for(exc) from exc
    return GeneratedContentResponse.from_generated(generated)


@router.post("/resources/discover")
async def discover_resources(
    body: DiscoverResourcesRequest,
    discovery: DiscoveryDep,
    overrides: OverridesDep,
) -> DiscoveredResourcesResponse:
    """Discover resources for a milestone, or a sub-milestone when
    ``sub_milestone_title`` is given.

    Generation failures fall back to a fixed resource list; only an
    unknown ``provider`` is reported as an error.
    """
    try:
        if body.sub_milestone_title is not None:
            resources = await discovery.discover_for_sub_milestone(
                body.params,
                body.sub_milestone_title,
                body.sub_milestone_objective or body.params.milestone_objective,
                provider=body.provider,
                disabled_overrides=overrides,
            )
        else:
            resources = await discovery.discover_for_milestone(
                body.params,
                provider=body.provider,
                disabled_overrides=overrides,
            )
    except KnotableLLMError as exc:
        raise http_error_for(exc) from exc

    logger.info(
        "resources_discovery_served",
        topic=body.params.topic,
        count=len(resources),
    )
    return DiscoveredResourcesResponse(resources=resources)
