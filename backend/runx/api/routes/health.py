"""Health Probes: liveness and store readiness.

Invariants:
    - /api/health/ answers 200 whenever the process serves requests
    - /api/health/ready answers 503 until the store responds to a ping
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from runx import __version__
from runx.config import Settings, get_settings
from runx.infrastructure import database

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": "runx-api", "version": __version__}


@router.get("/ready")
async def readiness(settings: Settings = Depends(get_settings)):
    # Read through the module: the lifespan rebinds database.db_manager
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "order_placement_mode": settings.order_placement_mode.value,
    }
