"""Provider factory -- derives enabled flags and builds adapters.

Uses PROVIDER_REGISTRY for extensibility. Adding a new provider
requires a new entry in PROVIDER_CONFIGS and in config/providers.yaml.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import SecretStr

from knotable.config import Settings
from knotable.llm.providers import PROVIDER_REGISTRY, LLMProvider
from knotable.llm.registry import ProviderCatalog, ProviderRegistry

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProviderFactoryConfig:
    """Typed configuration for creating an LLM provider instance."""

    get_api_key: Callable[[Settings], SecretStr | None]
    is_disabled: Callable[[Settings], bool]
    get_base_url: Callable[[Settings], str | None] | None = None
    extra_kwargs: dict[str, Any] = field(default_factory=dict)


PROVIDER_CONFIGS: dict[str, ProviderFactoryConfig] = {
    "gemini": ProviderFactoryConfig(
        get_api_key=lambda s: s.gemini_api_key,
        is_disabled=lambda s: s.disable_gemini,
    ),
    "openai": ProviderFactoryConfig(
        get_api_key=lambda s: s.openai_api_key,
        is_disabled=lambda s: s.disable_openai,
        get_base_url=lambda s: s.openai_base_url,
    ),
    "groq": ProviderFactoryConfig(
        get_api_key=lambda s: s.groq_api_key,
        is_disabled=lambda s: s.disable_groq,
        get_base_url=lambda s: s.groq_base_url,
        extra_kwargs={"provider_name": "groq"},
    ),
    "anthropic": ProviderFactoryConfig(
        get_api_key=lambda s: s.anthropic_api_key,
        is_disabled=lambda s: s.disable_anthropic,
    ),
}


def _api_key(settings: Settings, config: ProviderFactoryConfig) -> str | None:
    secret = config.get_api_key(settings)
    if secret is None:
        return None
    value = secret.get_secret_value().strip()
    return value or None


def derive_enabled_flags(settings: Settings) -> dict[str, bool]:
    """Enabled = API key present AND kill switch not set.

    Providers without a PROVIDER_CONFIGS entry are never enabled.
    """
    return {
        name: _api_key(settings, config) is not None
        and not config.is_disabled(settings)
        for name, config in PROVIDER_CONFIGS.items()
    }


def build_registry(settings: Settings, catalog: ProviderCatalog) -> ProviderRegistry:
    """Freeze enabled flags for this process and build the registry."""
    flags = derive_enabled_flags(settings)
    registry = ProviderRegistry.from_catalog(catalog, flags)
    logger.info(
        "provider_registry_built",
        configured=registry.names,
        enabled=[d.name for d in registry.list_enabled_providers()],
    )
    return registry


def create_providers(
    settings: Settings,
    registry: ProviderRegistry,
) -> dict[str, LLMProvider]:
    """Instantiate adapters for every enabled provider.

    Returns dict: provider_name -> LLMProvider instance. Default
    models come from the registry descriptors.
    """
    providers: dict[str, LLMProvider] = {}

    for descriptor in registry.list_enabled_providers():
        name = descriptor.name
        provider_cls = PROVIDER_REGISTRY.get(name)
        config = PROVIDER_CONFIGS.get(name)
        if provider_cls is None or config is None:
            logger.warning("llm_provider_without_adapter", provider=name)
            continue

        api_key = _api_key(settings, config)
        if api_key is None:
            continue

        kwargs: dict[str, Any] = {
            "api_key": api_key,
            "default_model": descriptor.default_model,
            "timeout_seconds": settings.llm_timeout_seconds,
        }
        if config.get_base_url is not None:
            kwargs["base_url"] = config.get_base_url(settings)

        kwargs.update(config.extra_kwargs)

        providers[name] = provider_cls(**kwargs)
        logger.info(
            "llm_provider_registered",
            provider=name,
            model=descriptor.default_model,
        )

    if not providers:
        logger.warning("no_llm_providers_configured")

    return providers
