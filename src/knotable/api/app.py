"""FastAPI application with lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from knotable.admin_settings import InMemoryAdminSettings
from knotable.api.middleware import RequestLoggingMiddleware
from knotable.api.routes.generation import router as generation_router
from knotable.api.routes.providers import router as providers_router
from knotable.config import get_settings
from knotable.content.generator import ContentGenerator
from knotable.content.resources import ResourceDiscovery
from knotable.llm.setup import create_provider_router
from knotable.logging_config import configure_logging_from_settings

logger = structlog.get_logger()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown.

    Startup:
        - Configure logging.
        - Load the provider catalog and build ProviderRouter.
        - Wire ContentGenerator, ResourceDiscovery and the admin store.
    """
    configure_logging_from_settings(settings)
    provider_router = create_provider_router(settings)
    generator = ContentGenerator(
        provider_router, timeout_seconds=settings.llm_timeout_seconds
    )
    app.state.provider_router = provider_router
    app.state.content_generator = generator
    app.state.resource_discovery = ResourceDiscovery(generator)
    app.state.admin_settings = InMemoryAdminSettings()

    logger.info(
        "app_started",
        environment=str(settings.environment),
        providers=provider_router.available_providers(),
    )
    yield
    logger.info("app_stopped")


app = FastAPI(
    title="Knotable",
    description="Learning-campaign content generation across LLM providers",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.is_dev,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)


@app.get("/health")
async def health(request: Request) -> JSONResponse:
    """Report whether at least one provider can take requests."""
    checks: dict[str, str] = {}
    overall = "ok"

    try:
        store = request.app.state.admin_settings
        overrides = await store.disabled_overrides()
        available = request.app.state.provider_router.available_providers(overrides)
    except AttributeError as e:
        logger.warning("health_check_not_initialized", error=str(e))
        available = []
        checks["providers"] = "error: not initialized"
        overall = "degraded"
    else:
        if available:
            checks["providers"] = "ok"
        else:
            checks["providers"] = "error: no providers enabled"
            overall = "degraded"

    status_code = 200 if overall == "ok" else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": overall,
            "checks": checks,
            "providers": available,
            "timestamp": datetime.now(UTC).isoformat(timespec="seconds"),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions."""
    logger.error("unhandled_exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(providers_router, prefix="/api/v1")
app.include_router(generation_router, prefix="/api/v1")
