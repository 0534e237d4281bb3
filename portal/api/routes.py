"""
SKY Solutions portal: centralised router registration.

This module is the single place where every page router is mounted onto the
FastAPI application.  Import and call ``register_routes(app)`` once in
``portal.app``.

  GET  /health                   - health check
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI

from portal import __version__, config
from portal.api.schemas import HealthResponse
from portal.cache_backend import MemoryCacheBackend, get_cache_backend

logger = logging.getLogger(__name__)


system_router = APIRouter(tags=["system"])


@system_router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check():
    cache = get_cache_backend()
    return HealthResponse(
        status="ok",
        version=__version__,
        backend_url=config.API_URL,
        cache_backend="memory" if isinstance(cache, MemoryCacheBackend) else "redis",
    )


def register_routes(app: FastAPI) -> None:
    """Mount all routers onto ``app``.

    Call this once from ``portal.app`` after creating the FastAPI instance.
    """
    from portal.routers import admin, entrepreneur, intake, investor, library, operations, profile, public

    app.include_router(system_router)
    app.include_router(public.router)
    app.include_router(profile.router)
    app.include_router(intake.router)
    app.include_router(entrepreneur.router)
    app.include_router(investor.router)

    app.include_router(library.router)
    app.include_router(operations.router)
    app.include_router(admin.router)

    logger.info("Routes registered: %d total endpoints", len(app.routes))
