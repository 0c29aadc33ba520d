# app/schemas/table.py
from pydantic import BaseModel, Field
from enum import Enum
from typing import Optional


class MesaEstado(str, Enum):
    LIBRE = "libre"
    OCUPADA = "ocupada"
    RESERVADA = "reservada"
    LIMPIEZA = "limpieza"
    FUERA_SERVICIO = "fuera_servicio"


class TipoMesa(str, Enum):
    ESTANDAR = "estandar"
    VENTANA = "ventana"
    TERRAZA_SUPERIOR = "terraza_superior"
    TERRAZA_INFERIOR = "terraza_inferior"
    BARRA = "barra"
    VIP = "vip"


class TableCreate(BaseModel):
    numero_mesa: str
    capacidad: int = Field(gt=0)
    tipo_mesa: TipoMesa = TipoMesa.ESTANDAR
    zona: Optional[str] = None
    ubicacion_descripcion: Optional[str] = None
    activa: bool = True
    position_x: float = 0
    position_y: float = 0
    notas_mesa: Optional[str] = None

    class Config:
        extra = "forbid"


class TableUpdate(BaseModel):
    numero_mesa: Optional[str] = None
    capacidad: Optional[int] = Field(default=None, gt=0)
    tipo_mesa: Optional[TipoMesa] = None
    zona: Optional[str] = None
    ubicacion_descripcion: Optional[str] = None
    activa: Optional[bool] = None
    position_x: Optional[float] = None
    position_y: Optional[float] = None
    notas_mesa: Optional[str] = None

    class Config:
        extra = "forbid"


class TableStateUpdate(BaseModel):
    estado: MesaEstado
    reserva_id: Optional[str] = None
    tiempo_estimado_liberacion: Optional[str] = None
    notas: Optional[str] = None

    class Config:
        extra = "forbid"


class SuggestedTable(BaseModel):
    id: str
    numero: str
    capacidad: int
    zona: Optional[str] = None


class TableSuggestion(BaseModel):
    tipo: str                       # individual | individual_mayor | combinacion_2
    score: float
    mesas: list[SuggestedTable] = []
    capacidad_total: int
    descripcion: str = ""
    zona: Optional[str] = None
    distancia: Optional[float] = None


class ServiceStart(BaseModel):
    numero_comensales: Optional[int] = Field(default=None, gt=0)
    reserva_id: Optional[str] = None
    ingresos_estimados: Optional[float] = None
    duration_minutes: Optional[int] = Field(default=None, ge=0)

    class Config:
        extra = "forbid"


class ServiceFinish(BaseModel):
    ingresos_reales: Optional[float] = None

    class Config:
        extra = "forbid"


class CombinationCreate(BaseModel):
    nombre_combinacion: str = Field(min_length=1)
    mesa_principal_id: str
    mesas_secundarias: list[str] = Field(min_length=1)
    capacidad_total: int = Field(gt=0)
    reserva_id: Optional[str] = None
    estado_combinacion: MesaEstado = MesaEstado.LIBRE
    activa: bool = True
    creado_por: Optional[str] = None

    class Config:
        extra = "forbid"
