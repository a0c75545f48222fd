"""Request/response models for the HTTP API."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from knotable.content.generator import GeneratedContent
from knotable.content.prompts import (
    CampaignBrief,
    DiscoveryParams,
    LearningParams,
    PreparedPrompt,
    build_campaign_prompt,
    build_objective_prompt,
    build_quiz_prompt,
    build_resources_prompt,
)
from knotable.content.resources import DiscoveredResource
from knotable.llm.registry import ProviderDescriptor
from knotable.llm.schemas import AUTO, GenerationResult

# -- requests -----------------------------------------------------------


class _GenerateBase(BaseModel, ABC):
    provider: str = AUTO
    prompt_override: str | None = Field(default=None, min_length=1)

    @abstractmethod
    def prepare(self) -> PreparedPrompt:
        """Build the prompt this request would send."""


class CampaignGenerateRequest(_GenerateBase):
    brief: CampaignBrief
    params: LearningParams | None = None

    def prepare(self) -> PreparedPrompt:
        return build_campaign_prompt(self.brief, self.params)


class QuizGenerateRequest(_GenerateBase):
    topic: str = Field(min_length=1)
    bloom_level: int = Field(ge=1, le=6)

    def prepare(self) -> PreparedPrompt:
        return build_quiz_prompt(self.topic, self.bloom_level)


class ObjectiveGenerateRequest(_GenerateBase):
    topic: str = Field(min_length=1)
    bloom_level: int = Field(ge=1, le=6)
    focus_areas: list[str] = []

    def prepare(self) -> PreparedPrompt:
        return build_objective_prompt(self.topic, self.bloom_level, self.focus_areas)


class ResourcesGenerateRequest(_GenerateBase):
    topic: str = Field(min_length=1)
    resource_types: list[str] = []

    def prepare(self) -> PreparedPrompt:
        return build_resources_prompt(self.topic, self.resource_types)


PROMPT_REQUESTS: dict[str, type[_GenerateBase]] = {
    "campaign": CampaignGenerateRequest,
    "quiz": QuizGenerateRequest,
    "objective": ObjectiveGenerateRequest,
    "resources": ResourcesGenerateRequest,
}


class DiscoverResourcesRequest(BaseModel):
    params: DiscoveryParams
    provider: str = AUTO
    sub_milestone_title: str | None = None
    sub_milestone_objective: str | None = None


class ProviderOverrideRequest(BaseModel):
    disabled: bool


# -- responses ----------------------------------------------------------


class PromptResponse(BaseModel):
    kind: str
    system_prompt: str
    user_prompt: str
    prompt_version: str
    temperature: float
    max_tokens: int

    @classmethod
    def from_prepared(cls, prepared: PreparedPrompt) -> "PromptResponse":
        return cls(**prepared._asdict())


class GeneratedContentResponse(BaseModel):
    data: dict[str, Any]
    prompt: PromptResponse
    result: GenerationResult

    @classmethod
    def from_generated(cls, generated: GeneratedContent) -> "GeneratedContentResponse":
        return cls(
            data=generated.data,
            prompt=PromptResponse.from_prepared(generated.prompt),
            result=generated.result,
        )


class ProviderResponse(BaseModel):
    name: str
    display_name: str
    default_model: str
    supported_models: list[str]
    cost_per_token: float

    @classmethod
    def from_descriptor(cls, descriptor: ProviderDescriptor) -> "ProviderResponse":
        return cls(
            name=descriptor.name,
            display_name=descriptor.display_name,
            default_model=descriptor.default_model,
            supported_models=list(descriptor.supported_models),
            cost_per_token=descriptor.cost_per_token,
        )


class ProvidersResponse(BaseModel):
    providers: list[ProviderResponse]
    priority: list[str]
    auto_selection: str | None  # provider "auto" would pick right now


class DiscoveredResourcesResponse(BaseModel):
    resources: list[DiscoveredResource]


class ProviderOverrideResponse(BaseModel):
    provider: str
    disabled: bool
