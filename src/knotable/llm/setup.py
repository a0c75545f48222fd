"""One-stop factory for assembling the generation stack.

Usage::

    from knotable.config import get_settings
    from knotable.llm import create_provider_router

    router = create_provider_router(get_settings())
    result = await router.generate(GenerationRequest(prompt_text=prompt))
"""

import structlog

from knotable.config import Settings
from knotable.llm.factory import build_registry, create_providers
from knotable.llm.registry import ProviderCatalog, load_catalog
from knotable.llm.router import ProviderRouter

logger = structlog.get_logger()


def create_provider_router(
    settings: Settings,
    catalog: ProviderCatalog | None = None,
) -> ProviderRouter:
    """Assemble ProviderRouter with registry and adapters.

    Args:
        settings: Application settings with API keys and kill switches.
        catalog: Pre-loaded provider catalog; read from
            settings.provider_catalog_path when omitted.

    Returns:
        Configured ProviderRouter ready for use.
    """
    if catalog is None:
        catalog = load_catalog(settings.provider_catalog_path)
    registry = build_registry(settings, catalog)
    providers = create_providers(settings, registry)

    router = ProviderRouter(
        providers=providers,
        registry=registry,
        priority=settings.provider_priority,
    )
    logger.info(
        "provider_router_created",
        providers=list(providers.keys()),
        priority=list(router.priority),
    )
    return router
