# app/schemas/customer.py
from pydantic import BaseModel, Field
from datetime import date
from typing import Optional


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str
    phone: str
    fecha_nacimiento: Optional[date] = None
    empresa: Optional[str] = None
    direccion: Optional[str] = None
    codigo_postal: Optional[str] = None
    ciudad: Optional[str] = None
    pais: Optional[str] = None
    idioma_preferido: str = "es"
    vip_status: bool = False
    preferencias_comida: Optional[str] = None
    restricciones_dieteticas: Optional[str] = None
    notas_internas: Optional[str] = None
    consentimiento_marketing: bool = False

    class Config:
        extra = "forbid"


class CustomerUpdate(BaseModel):
    """Partial update. Visit and spend counters are maintained server-side and are not writable."""
    name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    fecha_nacimiento: Optional[date] = None
    empresa: Optional[str] = None
    direccion: Optional[str] = None
    codigo_postal: Optional[str] = None
    ciudad: Optional[str] = None
    pais: Optional[str] = None
    idioma_preferido: Optional[str] = None
    vip_status: Optional[bool] = None
    preferencias_comida: Optional[str] = None
    restricciones_dieteticas: Optional[str] = None
    notas_internas: Optional[str] = None
    consentimiento_marketing: Optional[bool] = None

    class Config:
        extra = "forbid"


class CustomerRegister(BaseModel):
    nombre: str
    apellido: str
    email: str
    telefono: str

    class Config:
        extra = "forbid"


class NoteCreate(BaseModel):
    nota: str = Field(min_length=1)
    tipo: str = "general"
    es_importante: bool = False
    created_by: Optional[str] = None

    class Config:
        extra = "forbid"


class TagCreate(BaseModel):
    tag: str = Field(min_length=1)
    color: str = "#3B82F6"
    created_by: Optional[str] = None

    class Config:
        extra = "forbid"


class AlertCreate(BaseModel):
    tipo_alerta: str = Field(min_length=1)
    mensaje: str = Field(min_length=1)
    severidad: str = "media"
    activa: bool = True
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None
    created_by: Optional[str] = None

    class Config:
        extra = "forbid"


class AlertUpdate(BaseModel):
    tipo_alerta: Optional[str] = Field(default=None, min_length=1)
    mensaje: Optional[str] = Field(default=None, min_length=1)
    severidad: Optional[str] = None
    activa: Optional[bool] = None
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None

    class Config:
        extra = "forbid"
