# app/routers/occupancy.py
"""Zone occupancy widgets: client-side aggregate and the server-side view."""

from fastapi import APIRouter, Depends
from app.database import get_backend
from app.schemas.zone_stats import ZoneStat
from app.services.backend_client import BackendClient
from app.services.zone_stats_service import fetch_restaurant_stats, fetch_zone_stats_view

router = APIRouter()


@router.get("/occupancy/zones", response_model=list[ZoneStat])
async def get_zone_occupancy(backend: BackendClient = Depends(get_backend)):
    """Per-zone table counts from the active tables."""
    return await fetch_restaurant_stats(backend)


@router.get("/occupancy/zones/view", summary="Zone statistics computed by the backend")
async def get_zone_stats_view(backend: BackendClient = Depends(get_backend)):
    return await fetch_zone_stats_view(backend)
