"""Content generation for learning campaigns."""

from knotable.content.generator import ContentGenerator, GeneratedContent
from knotable.content.parsing import extract_json_object
from knotable.content.prompts import (
    CampaignBrief,
    DiscoveryParams,
    LearningParams,
    PreparedPrompt,
    build_campaign_prompt,
    build_discovery_prompt,
    build_objective_prompt,
    build_quiz_prompt,
    build_resources_prompt,
)
from knotable.content.resources import DiscoveredResource, ResourceDiscovery

__all__ = [
    "CampaignBrief",
    "ContentGenerator",
    "DiscoveredResource",
    "DiscoveryParams",
    "GeneratedContent",
    "LearningParams",
    "PreparedPrompt",
    "ResourceDiscovery",
    "build_campaign_prompt",
    "build_discovery_prompt",
    "build_objective_prompt",
    "build_quiz_prompt",
    "build_resources_prompt",
    "extract_json_object",
]
