# app/schemas/metrics.py
from pydantic import BaseModel
from datetime import date


class WeeklyTotals(BaseModel):
    total_reservas: int = 0
    reservas_confirmadas: int = 0
    reservas_canceladas: int = 0
    reservas_no_show: int = 0
    total_comensales: int = 0
    ingreso_promedio: float = 0
    dias_con_datos: int = 0


class WeeklySummary(BaseModel):
    fecha_inicio: date
    fecha_fin: date
    datos_diarios: list[dict] = []
    totales_semana: WeeklyTotals

