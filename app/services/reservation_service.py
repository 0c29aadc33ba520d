# app/services/reservation_service.py
"""
Reservation intake and listing against the `reservas` table.

Availability is decided server-side by `verificar_disponibilidad_mesa`;
this module only shapes requests and, for the dashboard lists, applies the
light client-side filtering/flattening the widgets expect.
"""

from datetime import date
from typing import Iterable, Optional

from app.schemas.reservation import (
    EstadoReserva, ReservationCreate, ReservationStats, ReservationUpdate,
)
from app.services.backend_client import BackendClient, BackendError
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

TABLE = "reservas"
UNASSIGNED_STATES = (EstadoReserva.PENDIENTE_CONFIRMACION.value, EstadoReserva.CONFIRMADA.value)
DEFAULT_DURATION_MIN = 120

LIST_COLUMNS = """
    id, cliente_id, mesa_id, fecha_reserva, hora_reserva, numero_comensales,
    estado_reserva, origen_reserva, notas_cliente, fecha_creacion,
    clientes!inner(id, nombre, apellido, email, telefono, vip_status),
    mesas(id, numero_mesa, capacidad)
"""
TODAY_COLUMNS = """
    *,
    clientes(id, nombre, apellido, email, telefono, vip_status),
    mesas(id, numero_mesa, capacidad, zona)
"""
DETAIL_COLUMNS = "*, clientes(*), mesas(*), personal(*)"


def validate_estado_reserva(value: Optional[str]) -> str:
    """Unknown states fall back to pending so a bad row never breaks a list."""
    try:
        return EstadoReserva(value).value
    except ValueError:
        logger.warning(f"Invalid reservation state: {value!r}, using "
                       f"'{EstadoReserva.PENDIENTE_CONFIRMACION.value}'")
        return EstadoReserva.PENDIENTE_CONFIRMACION.value


def filter_unassigned(rows: Iterable[dict]) -> list[dict]:
    """Rows without a table that are still pending or confirmed, earliest first."""
    unassigned = [r for r in rows if r.get("mesa_id") is None and r.get("estado_reserva") in UNASSIGNED_STATES]
    return sorted(unassigned, key=lambda r: r.get("hora_reserva") or "")


def flatten_reservation(row: dict) -> dict:
    """Adds the display fields the dashboard cards read directly."""
    cliente = row.get("clientes") or {}
    mesa = row.get("mesas") or {}
    nombre = " ".join(p for p in (cliente.get("nombre"), cliente.get("apellido")) if p)
    return {
        **row,
        "estado_reserva": validate_estado_reserva(row.get("estado_reserva")),
        "cliente_nombre": nombre or "Cliente",
        "numero_mesa": mesa.get("numero_mesa"),
        "telefono": cliente.get("telefono"),
    }


async def list_reservations(backend: BackendClient, fecha_inicio: Optional[date] = None,
                            fecha_fin: Optional[date] = None, estado: Optional[str] = None,
                            limit: int = 50, offset: int = 0) -> list[dict]:
    filters = []
    if fecha_inicio:
        filters.append(("fecha_reserva", "gte", fecha_inicio.isoformat()))
    if fecha_fin:
        filters.append(("fecha_reserva", "lte", fecha_fin.isoformat()))
    if estado:
        filters.append(("estado_reserva", "eq", estado))
    try:
        rows = await backend.select(TABLE, LIST_COLUMNS, filters=filters,
                                    order=[("fecha_reserva", False), ("hora_reserva", True)],
                                    limit=limit, offset=offset)
    except BackendError as e:
        logger.error(f"Error fetching reservations: {e.message}")
        raise
    return [{**r, "estado_reserva": validate_estado_reserva(r.get("estado_reserva"))} for r in rows or []]


async def today_reservations(backend: BackendClient, today: Optional[date] = None) -> list[dict]:
    fecha = (today or date.today()).isoformat()
    try:
        rows = await backend.select(TABLE, TODAY_COLUMNS, filters=[("fecha_reserva", "eq", fecha)],
                                    order=[("hora_reserva", True)],
                                    limit=settings.TODAY_RESERVATIONS_LIMIT)
    except BackendError as e:
        logger.error(f"Error fetching today reservations: {e.message}")
        raise
    return [flatten_reservation(r) for r in rows or []]


async def unassigned_reservations(backend: BackendClient, fecha: Optional[date] = None) -> list[dict]:
    target = (fecha or date.today()).isoformat()
    try:
        rows = await backend.select(
            TABLE, "*, clientes(*)",
            filters=[
                ("fecha_reserva", "eq", target),
                ("mesa_id", "is", None),
                ("estado_reserva", "in", UNASSIGNED_STATES),
            ],
            order=[("hora_reserva", True)],
        )
    except BackendError as e:
        logger.error(f"Error fetching unassigned reservations for {target}: {e.message}")
        raise
    return filter_unassigned(rows or [])


async def get_reservation(backend: BackendClient, reserva_id: str) -> dict:
    return await backend.select(TABLE, DETAIL_COLUMNS, filters=[("id", "eq", reserva_id)], single=True)


async def assign_table(backend: BackendClient, reserva_id: str, mesa_id: str) -> dict:
    values = {"mesa_id": mesa_id, "estado_reserva": EstadoReserva.CONFIRMADA.value}
    try:
        row = await backend.update(TABLE, values, filters=[("id", "eq", reserva_id)])
    except BackendError as e:
        logger.error(f"Error assigning table {mesa_id} to reservation {reserva_id}: {e.message}")
        raise
    logger.info(f"[RESERVA] {reserva_id} → mesa {mesa_id} (confirmada)")
    return row


async def create_reservation(backend: BackendClient, data: ReservationCreate) -> dict:
    row = data.model_dump(mode="json")
    row["estado_reserva"] = EstadoReserva.PENDIENTE_CONFIRMACION.value
    try:
        created = await backend.insert(TABLE, row)
    except BackendError as e:
        logger.error(f"Error creating reservation for {data.fecha_reserva} {data.hora_reserva}: "
                     f"{e.friendly_message} ({e.code})")
        raise
    logger.info(f"[RESERVA] created {created.get('id')}: {data.fecha_reserva} {data.hora_reserva} "
                f"for {data.numero_comensales}")
    return created


async def update_reservation(backend: BackendClient, reserva_id: str, data: ReservationUpdate) -> dict:
    values = data.model_dump(mode="json", exclude_unset=True)
    if not values:
        return await get_reservation(backend, reserva_id)
    try:
        return await backend.update(TABLE, values, filters=[("id", "eq", reserva_id)], columns=DETAIL_COLUMNS)
    except BackendError as e:
        logger.error(f"Error updating reservation {reserva_id}: {e.message}")
        raise


async def delete_reservation(backend: BackendClient, reserva_id: str) -> None:
    try:
        await backend.delete(TABLE, filters=[("id", "eq", reserva_id)])
    except BackendError as e:
        logger.error(f"Error deleting reservation {reserva_id}: {e.message}")
        raise
    logger.info(f"[RESERVA] deleted {reserva_id}")


async def check_availability(backend: BackendClient, fecha: date, hora_inicio: str, num_comensales: int,
                             duracion_minutos: int = DEFAULT_DURATION_MIN):
    return await backend.rpc("verificar_disponibilidad_mesa", {
        "p_fecha": fecha.isoformat(),
        "p_hora_inicio": hora_inicio,
        "p_num_comensales": num_comensales,
        "p_duracion_minutos": duracion_minutos,
    })


async def reservation_stats(backend: BackendClient, fecha: Optional[date] = None) -> ReservationStats:
    """Daily counters from `reservas_stats_daily`, computed live when the view has no row."""
    target = (fecha or date.today()).isoformat()
    try:
        row = await backend.select("reservas_stats_daily", "*", filters=[("fecha_reserva", "eq", target)],
                                   single=True)
        return ReservationStats(**row)
    except BackendError as e:
        logger.info(f"No materialized stats for {target} ({e.code}), computing live")

    rows = await backend.select(TABLE, "estado_reserva, numero_comensales",
                                filters=[("fecha_reserva", "eq", target)]) or []
    estados = [r.get("estado_reserva") for r in rows]
    return ReservationStats(
        fecha_reserva=target,
        total_reservas=len(rows),
        confirmadas=estados.count(EstadoReserva.CONFIRMADA.value),
        pendientes=estados.count(EstadoReserva.PENDIENTE_CONFIRMACION.value),
        completadas=estados.count(EstadoReserva.COMPLETADA.value),
        total_comensales=sum(r.get("numero_comensales") or 0 for r in rows),
    )
