"""Prompt templates for campaign content generation.

Templates live next to this module in ``templates/*.yaml``. Every
builder is pure: the same structured input always yields the same
prompt, byte for byte, so authors can audit or reproduce what was sent.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import NamedTuple

import yaml
from pydantic import BaseModel, Field, model_validator

TEMPLATES_DIR = Path(__file__).parent / "templates"

BLOOM_LEVELS: tuple[str, ...] = (
    "Remember",
    "Understand",
    "Apply",
    "Analyze",
    "Evaluate",
    "Create",
)


def bloom_level_name(level: int) -> str:
    """Name of a Bloom's Taxonomy level (1 = Remember ... 6 = Create).

    Raises:
        ValueError: if ``level`` is outside 1..6.
    """
    if not 1 <= level <= len(BLOOM_LEVELS):
        raise ValueError(f"Bloom level must be between 1 and 6, got {level}")
    return BLOOM_LEVELS[level - 1]


class PromptData(BaseModel):
    """Validated prompt template loaded from YAML.

    Fields:
        version: Template version, reported alongside generated content.
        system_prompt: System prompt text for the LLM.
        user_prompt_template: User prompt with ``{name}`` placeholders.
        temperature: Sampling temperature used with this template.
        max_tokens: Output token cap used with this template.
    """

    version: str = "unknown"
    system_prompt: str
    user_prompt_template: str
    temperature: float = 0.7
    max_tokens: int = 2000


class PreparedPrompt(NamedTuple):
    """Fully rendered prompt plus the generation knobs that go with it."""

    kind: str
    system_prompt: str
    user_prompt: str
    prompt_version: str
    temperature: float
    max_tokens: int


def load_prompt(path: str | Path) -> PromptData:
    """Load prompt template from YAML file.

    Raises:
        FileNotFoundError: If the prompt file does not exist.
        ValidationError: If required keys are missing or invalid.
    """
    prompt_path = Path(path)
    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt file not found: {prompt_path}")

    with prompt_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return PromptData.model_validate(data)


@lru_cache(maxsize=None)
def builtin_prompt(kind: str) -> PromptData:
    """Packaged template for ``kind`` (campaign, quiz, objective, ...)."""
    return load_prompt(TEMPLATES_DIR / f"{kind}.yaml")


_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def format_prompt(template: str, **values: str) -> str:
    """Substitute ``{name}`` placeholders in a single pass.

    Unknown placeholders are left untouched, and injected values are
    never re-scanned, so user text containing braces is safe. JSON
    examples in templates are not matched because ``{`` is followed by
    whitespace or a quote there.
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return values.get(key, match.group(0))

    return _PLACEHOLDER_RE.sub(_replace, template)


def _render(kind: str, **values: str) -> PreparedPrompt:
    data = builtin_prompt(kind)
    return PreparedPrompt(
        kind=kind,
        system_prompt=data.system_prompt,
        user_prompt=format_prompt(data.user_prompt_template, **values),
        prompt_version=data.version,
        temperature=data.temperature,
        max_tokens=data.max_tokens,
    )


def _join(items: list[str]) -> str:
    return ", ".join(items)


# -- structured inputs --------------------------------------------------


class CampaignBrief(BaseModel):
    """What the campaign author filled in on the wizard."""

    title: str
    topic: str
    description: str = ""
    target_audience: str | None = None
    starting_bloom_level: int = Field(default=1, ge=1, le=6)
    target_bloom_level: int = Field(default=3, ge=1, le=6)
    focus_areas: list[str] = []
    estimated_duration_days: int | None = Field(default=None, gt=0)
    tone: str | None = None

    @model_validator(mode="after")
    def levels_ascend(self) -> "CampaignBrief":
        if self.target_bloom_level < self.starting_bloom_level:
            raise ValueError(
                "target_bloom_level must not be below starting_bloom_level"
            )
        return self

    @property
    def milestone_count(self) -> int:
        return max(3, self.target_bloom_level - self.starting_bloom_level + 1)


class LearningParams(BaseModel):
    """Optional learner preferences from the wizard's second step."""

    learning_style: str | None = None
    difficulty_preference: str | None = None
    content_format: str | None = None
    time_commitment: str | None = None
    prerequisites: str | None = None


class DiscoveryParams(BaseModel):
    """Milestone context used to discover fresh learning resources."""

    topic: str
    milestone_title: str
    milestone_objective: str
    bloom_level: int = Field(ge=1, le=6)
    focus_areas: list[str] = []
    resource_types: list[str] = []

    @property
    def resource_count(self) -> int:
        return max(8, min(12, 6 + self.bloom_level))


# -- builders -----------------------------------------------------------


def build_campaign_prompt(
    brief: CampaignBrief,
    params: LearningParams | None = None,
) -> PreparedPrompt:
    """Prompt for a full campaign outline (milestones + sub-milestones)."""
    params = params or LearningParams()
    duration = brief.estimated_duration_days
    return _render(
        "campaign",
        title=brief.title,
        topic=brief.topic,
        description=brief.description,
        target_audience=brief.target_audience or "General learners",
        starting_bloom_level=str(brief.starting_bloom_level),
        starting_bloom_name=bloom_level_name(brief.starting_bloom_level),
        target_bloom_level=str(brief.target_bloom_level),
        target_bloom_name=bloom_level_name(brief.target_bloom_level),
        focus_areas=_join(brief.focus_areas),
        estimated_duration=str(duration) if duration is not None else "Flexible",
        tone=brief.tone or "professional",
        learning_style=params.learning_style or "Mixed",
        difficulty_preference=params.difficulty_preference or "Balanced",
        content_format=params.content_format or "Mixed",
        time_commitment=params.time_commitment or "Flexible",
        prerequisites=params.prerequisites or "None specified",
        milestone_count=str(brief.milestone_count),
    )


def build_quiz_prompt(topic: str, bloom_level: int) -> PreparedPrompt:
    """Prompt for five multiple-choice questions at a Bloom level."""
    return _render(
        "quiz",
        topic=topic,
        bloom_level_name=bloom_level_name(bloom_level),
    )


def build_objective_prompt(
    topic: str,
    bloom_level: int,
    focus_areas: list[str],
) -> PreparedPrompt:
    """Prompt for one measurable learning objective."""
    return _render(
        "objective",
        topic=topic,
        bloom_level_name=bloom_level_name(bloom_level),
        focus_areas=_join(focus_areas),
    )


def build_resources_prompt(topic: str, resource_types: list[str]) -> PreparedPrompt:
    """Prompt for a short list of external learning resources."""
    return _render(
        "resources",
        topic=topic,
        resource_types=_join(resource_types),
    )


def build_discovery_prompt(params: DiscoveryParams) -> PreparedPrompt:
    """Prompt for milestone-specific resource discovery."""
    resource_types = (
        _join(params.resource_types)
        if params.resource_types
        else "Mixed (videos, articles, documentation, code examples)"
    )
    return _render(
        "discovery",
        topic=params.topic,
        milestone_title=params.milestone_title,
        milestone_objective=params.milestone_objective,
        bloom_level=str(params.bloom_level),
        bloom_level_name=bloom_level_name(params.bloom_level),
        focus_areas=_join(params.focus_areas),
        resource_types=resource_types,
        resource_count=str(params.resource_count),
    )
