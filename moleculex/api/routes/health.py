"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from moleculex.application.dto.responses import HealthResponse
from moleculex.application.services import get_remote_store
from moleculex.config import get_settings
from moleculex.core.exceptions import MoleculeXError
from moleculex.core.interfaces import Relation

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/store", response_model=HealthResponse)
async def store_health() -> HealthResponse:
    """Remote store reachability."""
    settings = get_settings()
    error = None
    try:
        await get_remote_store().find_first(Relation.FAMILY_PROFILES, "family", "Citrus")
    except MoleculeXError as e:
        error = e.message

    return HealthResponse(
        status="healthy" if error is None else "degraded",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        backend=settings.remote.backend,
        error=error,
    )
