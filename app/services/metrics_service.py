# app/services/metrics_service.py
"""
Reservation analytics widgets.

The backend materializes per-day, per-hour and per-channel counters
(`reservas_metricas_diarias`, `reservas_metricas_horarias`,
`reservas_metricas_canales`); this module reads them and folds a week of
daily rows into totals.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from app.schemas.metrics import WeeklySummary, WeeklyTotals
from app.services.backend_client import BackendClient, BackendError
from app.utils.logger import get_logger

logger = get_logger(__name__)

DAILY = "reservas_metricas_diarias"
HOURLY = "reservas_metricas_horarias"
CHANNELS = "reservas_metricas_canales"

SUMMED_FIELDS = ("total_reservas", "reservas_confirmadas", "reservas_canceladas",
                 "reservas_no_show", "total_comensales")


def week_bounds(today: date) -> tuple[date, date]:
    """Sunday to Saturday around `today`."""
    start = today - timedelta(days=today.isoweekday() % 7)
    return start, start + timedelta(days=6)


def summarize_week(rows: Iterable[dict]) -> WeeklyTotals:
    """Sum the daily counters; `ingreso_promedio` is averaged over the days that have a row."""
    totals = WeeklyTotals()
    ingreso = 0.0
    for row in rows:
        for field in SUMMED_FIELDS:
            setattr(totals, field, getattr(totals, field) + (row.get(field) or 0))
        ingreso += row.get("ingreso_promedio") or 0
        totals.dias_con_datos += 1
    if totals.dias_con_datos:
        totals.ingreso_promedio = ingreso / totals.dias_con_datos
    return totals


async def daily_metrics(backend: BackendClient, fecha: Optional[date] = None) -> Optional[dict]:
    """The day's row, or None when the backend has not computed it yet."""
    target = (fecha or date.today()).isoformat()
    rows = await backend.select(DAILY, "*", filters=[("fecha", "eq", target)], limit=1)
    return rows[0] if rows else None


async def metrics_range(backend: BackendClient, fecha_inicio: date, fecha_fin: date) -> list[dict]:
    try:
        rows = await backend.select(DAILY, "*",
                                    filters=[("fecha", "gte", fecha_inicio.isoformat()),
                                             ("fecha", "lte", fecha_fin.isoformat())],
                                    order=[("fecha", True)])
    except BackendError as e:
        logger.error(f"Error fetching daily metrics {fecha_inicio}..{fecha_fin}: {e.message}")
        raise
    return rows or []


async def hourly_metrics(backend: BackendClient, fecha: Optional[date] = None) -> list[dict]:
    target = (fecha or date.today()).isoformat()
    return await backend.select(HOURLY, "*", filters=[("fecha", "eq", target)], order=[("hora", True)]) or []


async def channel_metrics(backend: BackendClient, fecha: Optional[date] = None) -> list[dict]:
    target = (fecha or date.today()).isoformat()
    return await backend.select(CHANNELS, "*", filters=[("fecha", "eq", target)],
                                order=[("total_reservas", False)]) or []


async def weekly_summary(backend: BackendClient, today: Optional[date] = None) -> WeeklySummary:
    inicio, fin = week_bounds(today or date.today())
    rows = await metrics_range(backend, inicio, fin)
    logger.debug(f"Weekly metrics {inicio}..{fin}: {len(rows)} day(s) with data")
    return WeeklySummary(fecha_inicio=inicio, fecha_fin=fin, datos_diarios=rows,
                         totales_semana=summarize_week(rows))
