# app/schemas/reservation.py
from pydantic import BaseModel, Field
from datetime import date
from enum import Enum
from typing import Optional


class EstadoReserva(str, Enum):
    PENDIENTE_CONFIRMACION = "pendiente_confirmacion"
    CONFIRMADA = "confirmada"
    CANCELADA_USUARIO = "cancelada_usuario"
    CANCELADA_RESTAURANTE = "cancelada_restaurante"
    COMPLETADA = "completada"
    NO_SHOW = "no_show"


class OrigenReserva(str, Enum):
    WEB = "web"
    CHATBOT = "chatbot"
    WHATSAPP = "whatsapp"
    TELEFONO = "telefono"
    EN_PERSONA = "en_persona"


HORA_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


class ReservationCreate(BaseModel):
    cliente_id: str
    fecha_reserva: date
    hora_reserva: str = Field(pattern=HORA_PATTERN)
    numero_comensales: int = Field(gt=0)
    mesa_id: Optional[str] = None
    origen_reserva: OrigenReserva = OrigenReserva.WEB
    notas_cliente: Optional[str] = None
    notas_restaurante: Optional[str] = None

    class Config:
        extra = "forbid"


class ReservationUpdate(BaseModel):
    """Partial update: only the fields sent are written."""
    fecha_reserva: Optional[date] = None
    hora_reserva: Optional[str] = Field(default=None, pattern=HORA_PATTERN)
    numero_comensales: Optional[int] = Field(default=None, gt=0)
    mesa_id: Optional[str] = None
    estado_reserva: Optional[EstadoReserva] = None
    notas_cliente: Optional[str] = None
    notas_restaurante: Optional[str] = None

    class Config:
        extra = "forbid"


class TableAssignment(BaseModel):
    mesa_id: str

    class Config:
        extra = "forbid"


class ReservationStats(BaseModel):
    fecha_reserva: date
    total_reservas: int = 0
    confirmadas: int = 0
    pendientes: int = 0
    completadas: int = 0
    total_comensales: int = 0

    class Config:
        extra = "ignore"
