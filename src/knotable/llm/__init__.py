"""LLM infrastructure: providers, registry, router, errors.

Quick start::

    from knotable.config import get_settings
    from knotable.llm import GenerationRequest, create_provider_router

    router = create_provider_router(get_settings())
    result = await router.generate(GenerationRequest(prompt_text=prompt))
"""

from knotable.llm.errors import (
    AllProvidersFailedError,
    ErrorKind,
    InvalidCredentialsError,
    KnotableLLMError,
    MalformedGenerationResponseError,
    ModelNotFoundError,
    NoProvidersAvailableError,
    ProviderError,
    ProviderNetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
    UnknownProviderError,
)
from knotable.llm.registry import ProviderDescriptor, ProviderRegistry
from knotable.llm.router import ProviderRouter
from knotable.llm.schemas import AUTO, GenerationRequest, GenerationResult
from knotable.llm.setup import create_provider_router

__all__ = [
    "AUTO",
    "AllProvidersFailedError",
    "ErrorKind",
    "GenerationRequest",
    "GenerationResult",
    "InvalidCredentialsError",
    "KnotableLLMError",
    "MalformedGenerationResponseError",
    "ModelNotFoundError",
    "NoProvidersAvailableError",
    "ProviderDescriptor",
    "ProviderError",
    "ProviderNetworkError",
    "ProviderRegistry",
    "ProviderRouter",
    "ProviderTimeoutError",
    "QuotaExceededError",
    "UnknownProviderError",
    "create_provider_router",
]
