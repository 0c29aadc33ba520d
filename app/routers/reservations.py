# app/routers/reservations.py
"""Reservations: intake, listing, table assignment and availability."""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from app.database import get_backend
from app.schemas.reservation import (
    EstadoReserva, ReservationCreate, ReservationStats, ReservationUpdate, TableAssignment,
)
from app.services.backend_client import BackendClient
from app.services import reservation_service

router = APIRouter()


@router.get("/reservations", summary="List reservations")
async def list_reservations(fecha_inicio: Optional[date] = None, fecha_fin: Optional[date] = None,
                            estado: Optional[EstadoReserva] = None,
                            limit: int = Query(50, ge=1, le=500), offset: int = Query(0, ge=0),
                            backend: BackendClient = Depends(get_backend)):
    return await reservation_service.list_reservations(
        backend, fecha_inicio, fecha_fin, estado.value if estado else None, limit, offset)


@router.get("/reservations/today", summary="Today's reservations for the dashboard")
async def today_reservations(backend: BackendClient = Depends(get_backend)):
    return await reservation_service.today_reservations(backend)


@router.get("/reservations/unassigned", summary="Pending/confirmed reservations without a table")
async def unassigned_reservations(fecha: Optional[date] = None, backend: BackendClient = Depends(get_backend)):
    return await reservation_service.unassigned_reservations(backend, fecha)


@router.get("/reservations/stats", response_model=ReservationStats)
async def reservation_stats(fecha: Optional[date] = None, backend: BackendClient = Depends(get_backend)):
    return await reservation_service.reservation_stats(backend, fecha)


@router.get("/reservations/availability", summary="Check table availability (server-side)")
async def check_availability(fecha: date, hora: str, comensales: int = Query(..., gt=0),
                             duracion: int = Query(120, gt=0),
                             backend: BackendClient = Depends(get_backend)):
    return await reservation_service.check_availability(backend, fecha, hora, comensales, duracion)


@router.get("/reservations/{reserva_id}")
async def get_reservation(reserva_id: str, backend: BackendClient = Depends(get_backend)):
    return await reservation_service.get_reservation(backend, reserva_id)


@router.post("/reservations", status_code=201)
async def create_reservation(body: ReservationCreate, backend: BackendClient = Depends(get_backend)):
    return await reservation_service.create_reservation(backend, body)


@router.patch("/reservations/{reserva_id}")
async def update_reservation(reserva_id: str, body: ReservationUpdate,
                             backend: BackendClient = Depends(get_backend)):
    return await reservation_service.update_reservation(backend, reserva_id, body)


@router.put("/reservations/{reserva_id}/table", summary="Assign a table and confirm")
async def assign_table(reserva_id: str, body: TableAssignment, backend: BackendClient = Depends(get_backend)):
    return await reservation_service.assign_table(backend, reserva_id, body.mesa_id)


@router.delete("/reservations/{reserva_id}")
async def delete_reservation(reserva_id: str, backend: BackendClient = Depends(get_backend)):
    await reservation_service.delete_reservation(backend, reserva_id)
    return {"id": reserva_id, "status": "deleted"}
