"""FastAPI dependency injection."""

from __future__ import annotations

from typing import cast

from fastapi import Request

from knotable.admin_settings import AdminSettingsStore
from knotable.content.generator import ContentGenerator
from knotable.content.resources import ResourceDiscovery
from knotable.llm.router import ProviderRouter

__all__ = [
    "get_admin_settings",
    "get_content_generator",
    "get_disabled_overrides",
    "get_provider_router",
    "get_resource_discovery",
]


async def get_provider_router(request: Request) -> ProviderRouter:
    """Retrieve ProviderRouter from app state.

    Initialized during lifespan startup.
    """
    return cast(ProviderRouter, request.app.state.provider_router)


async def get_content_generator(request: Request) -> ContentGenerator:
    return cast(ContentGenerator, request.app.state.content_generator)


async def get_resource_discovery(request: Request) -> ResourceDiscovery:
    return cast(ResourceDiscovery, request.app.state.resource_discovery)


async def get_admin_settings(request: Request) -> AdminSettingsStore:
    return cast(AdminSettingsStore, request.app.state.admin_settings)


async def get_disabled_overrides(request: Request) -> dict[str, bool]:
    """Per-request provider kill switches from the admin settings store."""
    store = await get_admin_settings(request)
    return await store.disabled_overrides()
