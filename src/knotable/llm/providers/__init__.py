"""LLM provider implementations.

PROVIDER_REGISTRY maps provider names (used in config/providers.yaml)
to their implementation classes. To add a new provider:

1. Create a new module in this package (e.g., mistral.py)
2. Implement LLMProvider subclass
3. Add entry to PROVIDER_REGISTRY below and to PROVIDER_CONFIGS
   in knotable.llm.factory
"""

from knotable.llm.providers.anthropic import AnthropicProvider
from knotable.llm.providers.base import LLMProvider, classify_vendor_error
from knotable.llm.providers.gemini import GeminiProvider
from knotable.llm.providers.openai_compat import OpenAICompatProvider

PROVIDER_REGISTRY: dict[str, type[LLMProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAICompatProvider,
    "groq": OpenAICompatProvider,
    "anthropic": AnthropicProvider,
}

__all__ = [
    "PROVIDER_REGISTRY",
    "AnthropicProvider",
    "GeminiProvider",
    "LLMProvider",
    "OpenAICompatProvider",
    "classify_vendor_error",
]
