# app/routers/health.py
"""
System health check and restaurant configuration.
Health returns status of this service, backend reachability and timers.
"""

from fastapi import APIRouter, Depends
from datetime import datetime, timezone
from app.database import AppContext, get_backend, get_context
from app.services.backend_client import BackendClient
from app.services.table_service import restaurant_config

router = APIRouter()


@router.get("/health", summary="System health check")
async def health_check(context: AppContext = Depends(get_context)):
    """
    Returns:
    - Service status
    - Backend reachability
    - Timer refresher state and number of active timers
    """
    result = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "ok",
        "backend": "unknown",
        "timers": {
            "refresher": "running" if context.refresher.running else "stopped",
            "total": len(context.timers),
            "active": context.timers.active_count(),
        },
    }

    if await context.backend.ping():
        result["backend"] = "ok"
    else:
        result["backend"] = "unreachable"
        result["status"] = "degraded"

    return result


@router.get("/config", summary="Restaurant configuration")
async def get_config(backend: BackendClient = Depends(get_backend)):
    return await restaurant_config(backend)
