"""Provider listing and admin override endpoints.

Routes
------
- ``GET  /providers``              - Enabled providers after admin overrides
- ``PUT  /admin/providers/{name}`` - Set or clear a provider kill switch
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException

from knotable.admin_settings import AdminSettingsStore, disabled_key
from knotable.api.deps import (
    get_admin_settings,
    get_disabled_overrides,
    get_provider_router,
)
from knotable.api.schemas import (
    ProviderOverrideRequest,
    ProviderOverrideResponse,
    ProviderResponse,
    ProvidersResponse,
)
from knotable.llm.errors import NoProvidersAvailableError, UnknownProviderError
from knotable.llm.router import ProviderRouter

logger = structlog.get_logger()

router = APIRouter(tags=["providers"])

RouterDep = Annotated[ProviderRouter, Depends(get_provider_router)]
AdminDep = Annotated[AdminSettingsStore, Depends(get_admin_settings)]
OverridesDep = Annotated[dict[str, bool], Depends(get_disabled_overrides)]


@router.get("/providers")
async def list_providers(
    provider_router: RouterDep,
    overrides: OverridesDep,
) -> ProvidersResponse:
    """List providers a request could be routed to right now."""
    available = set(provider_router.available_providers(overrides))
    descriptors = [
        d
        for d in provider_router.registry.list_enabled_providers(overrides)
        if d.name in available
    ]
    try:
        auto_selection: str | None = provider_router.select_provider(
            disabled_overrides=overrides
        )
    except NoProvidersAvailableError:
        auto_selection = None

    return ProvidersResponse(
        providers=[ProviderResponse.from_descriptor(d) for d in descriptors],
        priority=list(provider_router.priority),
        auto_selection=auto_selection,
    )


@router.put("/admin/providers/{name}")
async def set_provider_override(
    name: str,
    body: ProviderOverrideRequest,
    provider_router: RouterDep,
    store: AdminDep,
) -> ProviderOverrideResponse:
    """Disable (or re-allow) a configured provider for all requests.

    Clearing the override never enables a provider that is disabled by
    configuration. Returns 404 for a provider that is not configured.
    """
    try:
        provider_router.registry.describe(name)
    except UnknownProviderError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    await store.set(disabled_key(name), "true" if body.disabled else "false")
    logger.info("provider_override_set", provider=name, disabled=body.disabled)
    return ProviderOverrideResponse(provider=name, disabled=body.disabled)
