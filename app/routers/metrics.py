# app/routers/metrics.py
"""Reservation analytics: daily, hourly, per-channel and weekly metrics."""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from app.database import get_backend
from app.schemas.metrics import WeeklySummary
from app.services.backend_client import BackendClient
from app.services import metrics_service

router = APIRouter()


@router.get("/metrics/daily", summary="Materialized metrics for one day")
async def daily_metrics(fecha: Optional[date] = None, backend: BackendClient = Depends(get_backend)):
    """Returns null when the backend has not computed the day yet."""
    return await metrics_service.daily_metrics(backend, fecha)


@router.get("/metrics/range", summary="Daily metrics between two dates")
async def metrics_range(fecha_inicio: date, fecha_fin: date, backend: BackendClient = Depends(get_backend)):
    if fecha_fin < fecha_inicio:
        raise HTTPException(status_code=422, detail="fecha_fin must not be before fecha_inicio")
    return await metrics_service.metrics_range(backend, fecha_inicio, fecha_fin)


@router.get("/metrics/hourly")
async def hourly_metrics(fecha: Optional[date] = None, backend: BackendClient = Depends(get_backend)):
    return await metrics_service.hourly_metrics(backend, fecha)


@router.get("/metrics/channels", summary="Reservations per channel, busiest first")
async def channel_metrics(fecha: Optional[date] = None, backend: BackendClient = Depends(get_backend)):
    return await metrics_service.channel_metrics(backend, fecha)


@router.get("/metrics/weekly", response_model=WeeklySummary, summary="Current week totals")
async def weekly_summary(backend: BackendClient = Depends(get_backend)):
    return await metrics_service.weekly_summary(backend)
