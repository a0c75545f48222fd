"""Resource discovery for milestones and sub-milestones.

Models answer the discovery prompt in two shapes: a list of bare URL
strings, or a list of objects with url/title/type/... fields, either
at the top level or under a "resources" key. parse_resource_items()
turns both into an explicit tagged variant before anything else looks
at them, and normalize_resource() fills gaps from the URL itself.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Literal
from urllib.parse import quote, unquote, urlsplit

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from knotable.content.generator import ContentGenerator
from knotable.content.prompts import DiscoveryParams, build_discovery_prompt
from knotable.llm.errors import (
    AllProvidersFailedError,
    MalformedGenerationResponseError,
    NoProvidersAvailableError,
)
from knotable.llm.schemas import AUTO

logger = structlog.get_logger()

MIN_RESOURCES = 6
MAX_RESOURCES = 12
MAX_SUB_MILESTONE_RESOURCES = 6
SELF_PACED = "Self-paced"

PROVIDER_NAMES: dict[str, str] = {
    "reactjs.org": "React",
    "developer.mozilla.org": "MDN",
    "youtube.com": "YouTube",
    "youtu.be": "YouTube",
    "github.com": "GitHub",
    "codepen.io": "CodePen",
    "codesandbox.io": "CodeSandbox",
    "medium.com": "Medium",
    "dev.to": "Dev.to",
    "freecodecamp.org": "FreeCodeCamp",
    "w3schools.com": "W3Schools",
    "stackoverflow.com": "Stack Overflow",
}


class DiscoveredResource(BaseModel):
    """A learning resource ready to be attached to a milestone."""

    url: str
    title: str
    type: str
    provider: str
    description: str | None = None
    estimated_duration: str | None = None


class UrlResourceItem(BaseModel):
    """Bare URL string returned by the model."""

    variant: Literal["url"] = "url"
    url: str


class ObjectResourceItem(BaseModel):
    """Structured resource object returned by the model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    variant: Literal["object"] = "object"
    url: str = Field(min_length=1)
    title: str | None = None
    type: str | None = None
    provider: str | None = None
    description: str | None = None
    estimated_duration: str | None = Field(default=None, alias="estimatedDuration")


RawResourceItem = UrlResourceItem | ObjectResourceItem


def parse_resource_items(payload: Any) -> list[RawResourceItem]:
    """Normalize the model's payload into tagged resource items.

    Accepts a list, or a mapping holding the list under "resources".
    Items that are neither a non-empty string nor an object with a
    "url" are dropped.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("resources", [])
    if not isinstance(payload, list):
        return []

    items: list[RawResourceItem] = []
    for raw in payload:
        if isinstance(raw, str):
            if raw.strip():
                items.append(UrlResourceItem(url=raw.strip()))
            continue
        if isinstance(raw, Mapping):
            try:
                items.append(ObjectResourceItem.model_validate(raw))
            except ValidationError:
                logger.debug("resource_item_skipped", item=str(raw)[:200])
            continue
        logger.debug("resource_item_skipped", item=str(raw)[:200])
    return items


def normalize_resource(
    item: RawResourceItem,
    milestone_title: str,
) -> DiscoveredResource:
    """Fill missing fields of a parsed item from its URL."""
    default_description = f"Resource for {milestone_title}"
    if isinstance(item, UrlResourceItem):
        return DiscoveredResource(
            url=item.url,
            title=extract_title_from_url(item.url),
            type=detect_resource_type(item.url),
            provider=extract_provider_from_url(item.url),
            description=default_description,
            estimated_duration=SELF_PACED,
        )
    return DiscoveredResource(
        url=item.url,
        title=item.title or extract_title_from_url(item.url),
        type=item.type or detect_resource_type(item.url),
        provider=item.provider or extract_provider_from_url(item.url),
        description=item.description or default_description,
        estimated_duration=item.estimated_duration or SELF_PACED,
    )


# -- URL heuristics -----------------------------------------------------

_SEPARATORS_RE = re.compile(r"[-_]+")
_EXTENSION_RE = re.compile(r"\.[a-z0-9]+$", re.IGNORECASE)


def _hostname(url: str) -> str | None:
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return None
    return parts.hostname


def extract_title_from_url(url: str) -> str:
    """Human-readable title from the last path segment of ``url``.

    Falls back to the hostname (without "www.") and returns the input
    unchanged when it is not an absolute URL.
    """
    hostname = _hostname(url)
    if hostname is None:
        return url

    segments = [s for s in urlsplit(url).path.split("/") if s]
    if not segments:
        return hostname.removeprefix("www.")
    text = _EXTENSION_RE.sub("", _SEPARATORS_RE.sub(" ", unquote(segments[-1])))
    title = " ".join(word[:1].upper() + word[1:] for word in text.split(" ")).strip()
    return title or hostname.removeprefix("www.")


def detect_resource_type(url: str) -> str:
    """Guess resource type (video, code, documentation, ...) from ``url``."""
    lowered = url.lower()

    if any(d in lowered for d in ("youtube.com", "youtu.be", "vimeo.com")):
        return "video"
    if any(d in lowered for d in ("github.com", "codepen.io", "codesandbox.io")):
        return "code"
    if any(d in lowered for d in (".pdf", "docs.", "documentation")):
        return "documentation"
    if "jsfiddle.net" in lowered:
        return "interactive"
    if any(d in lowered for d in ("leetcode.com", "codewars.com", "hackerrank.com")):
        return "exercise"
    return "article"


def extract_provider_from_url(url: str) -> str:
    """Friendly provider name for well-known hosts, else first host label."""
    hostname = _hostname(url)
    if hostname is None:
        return "Unknown"
    hostname = re.sub(r"^www\.", "", hostname)
    return PROVIDER_NAMES.get(hostname, hostname.split(".")[0])


def fallback_resources(params: DiscoveryParams) -> list[DiscoveredResource]:
    """Generic resources used to top up or replace a discovery result."""
    search = quote(f"{params.topic} tutorial")
    return [
        DiscoveredResource(
            url="https://developer.mozilla.org/en-US/docs/Web/JavaScript",
            title="MDN JavaScript Documentation",
            type="documentation",
            provider="MDN",
            description="Official JavaScript documentation",
            estimated_duration=SELF_PACED,
        ),
        DiscoveredResource(
            url="https://reactjs.org/docs/getting-started.html",
            title="React Official Documentation",
            type="documentation",
            provider="React",
            description="Official React documentation",
            estimated_duration=SELF_PACED,
        ),
        DiscoveredResource(
            url=f"https://www.youtube.com/results?search_query={search}",
            title=f"{params.topic} Tutorial Videos",
            type="video",
            provider="YouTube",
            description=f"Video tutorials for {params.topic}",
            estimated_duration="30-60 minutes",
        ),
    ]


class ResourceDiscovery:
    """Discovers resources for milestones through ContentGenerator.

    Args:
        generator: ContentGenerator used to call the LLM.
        fallback_on_failure: When true, a failed or unparseable
            generation yields fallback_resources() instead of raising.
            UnknownProviderError always propagates.
    """

    def __init__(
        self,
        generator: ContentGenerator,
        *,
        fallback_on_failure: bool = True,
    ) -> None:
        self._generator = generator
        self._fallback_on_failure = fallback_on_failure

    async def discover_for_milestone(
        self,
        params: DiscoveryParams,
        *,
        provider: str = AUTO,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> list[DiscoveredResource]:
        """Discover up to MAX_RESOURCES resources for a milestone."""
        try:
            generated = await self._generator.generate_prepared(
                build_discovery_prompt(params),
                provider=provider,
                disabled_overrides=disabled_overrides,
            )
        except (
            AllProvidersFailedError,
            NoProvidersAvailableError,
            MalformedGenerationResponseError,
        ) as exc:
            if not self._fallback_on_failure:
                raise
            logger.warning(
                "resource_discovery_fallback",
                topic=params.topic,
                milestone=params.milestone_title,
                error=str(exc),
            )
            return fallback_resources(params)

        resources = [
            normalize_resource(item, params.milestone_title)
            for item in parse_resource_items(generated.data)
        ]
        if len(resources) < MIN_RESOURCES:
            resources.extend(fallback_resources(params))

        logger.info(
            "resources_discovered",
            topic=params.topic,
            milestone=params.milestone_title,
            count=min(len(resources), MAX_RESOURCES),
        )
        return resources[:MAX_RESOURCES]

    async def discover_for_sub_milestone(
        self,
        params: DiscoveryParams,
        title: str,
        objective: str,
        *,
        provider: str = AUTO,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> list[DiscoveredResource]:
        """Fewer, more focused resources for a sub-milestone."""
        sub_params = params.model_copy(
            update={"milestone_title": title, "milestone_objective": objective}
        )
        resources = await self.discover_for_milestone(
            sub_params,
            provider=provider,
            disabled_overrides=disabled_overrides,
        )
        return resources[:MAX_SUB_MILESTONE_RESOURCES]
