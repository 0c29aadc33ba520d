# app/schemas/zone_stats.py
from pydantic import BaseModel


class ZoneStat(BaseModel):
    zona: str
    total_mesas: int = 0
    mesas_libres: int = 0
    mesas_ocupadas: int = 0
    mesas_reservadas: int = 0
    mesas_limpieza: int = 0
    porcentaje_ocupacion: float = 0
