# app/services/table_service.py
"""
Tables (`mesas`), their live state (`estados_mesa`), saved table
combinations (`combinaciones_mesa`) and table service.

State changes, seat suggestions and service start/finish are stored
procedures; this module validates what comes back and passes the rest through.
"""

from typing import Optional

from app.schemas.table import (
    CombinationCreate, MesaEstado, ServiceFinish, ServiceStart, TableCreate, TableStateUpdate,
    TableSuggestion, TableUpdate,
)
from app.services.backend_client import BackendClient, BackendError
from app.utils.logger import get_logger

logger = get_logger(__name__)

TABLE = "mesas"
COMBINATIONS_TABLE = "combinaciones_mesa"


def validate_mesa_estado(value: Optional[str]) -> MesaEstado:
    try:
        return MesaEstado(value)
    except ValueError:
        logger.warning(f"Invalid table state: {value!r}, using '{MesaEstado.LIBRE.value}'")
        return MesaEstado.LIBRE


def attach_state(row: dict) -> dict:
    """Replace the embedded `estados_mesa` list with its first entry, state validated."""
    row = dict(row)
    states = row.pop("estados_mesa", None) or []
    state = dict(states[0]) if states else None
    if state is not None:
        state["estado"] = validate_mesa_estado(state.get("estado")).value
    row["estado"] = state
    return row


async def list_tables(backend: BackendClient) -> list[dict]:
    return await backend.select(TABLE, "*", order=[("numero_mesa", True)]) or []


async def get_table(backend: BackendClient, mesa_id: str) -> dict:
    return await backend.select(TABLE, "*, estados_mesa(*)", filters=[("id", "eq", mesa_id)], single=True)


async def tables_with_states(backend: BackendClient) -> list[dict]:
    try:
        rows = await backend.select(TABLE, "*, estados_mesa(*)", filters=[("activa", "eq", True)],
                                    order=[("numero_mesa", True)])
    except BackendError as e:
        logger.error(f"Error fetching tables with states: {e.message}")
        raise
    return [attach_state(r) for r in rows or []]


async def create_table(backend: BackendClient, data: TableCreate) -> dict:
    created = await backend.insert(TABLE, data.model_dump(mode="json"))
    logger.info(f"[MESA] created {data.numero_mesa} ({data.capacidad} pax, zona={data.zona})")
    return created


async def update_table(backend: BackendClient, mesa_id: str, data: TableUpdate) -> dict:
    values = data.model_dump(mode="json", exclude_unset=True)
    if not values:
        return await get_table(backend, mesa_id)
    return await backend.update(TABLE, values, filters=[("id", "eq", mesa_id)])


async def update_table_state(backend: BackendClient, mesa_id: str, data: TableStateUpdate):
    try:
        result = await backend.rpc("actualizar_estado_mesa", {
            "p_mesa_id": mesa_id,
            "p_nuevo_estado": data.estado.value,
            "p_reserva_id": data.reserva_id,
            "p_tiempo_estimado_liberacion": data.tiempo_estimado_liberacion,
            "p_notas": data.notas,
        })
    except BackendError as e:
        logger.error(f"Error updating table state {mesa_id} → {data.estado.value}: {e.message}")
        raise
    logger.info(f"[MESA] {mesa_id} → {data.estado.value}")
    return result


async def suggest_tables(backend: BackendClient, num_comensales: int,
                         zona_preferida: Optional[str] = None) -> list[TableSuggestion]:
    try:
        rows = await backend.rpc("sugerir_mesas_para_reserva", {
            "p_num_comensales": num_comensales,
            "p_zona_preferida": zona_preferida,
        })
    except BackendError as e:
        logger.error(f"Error getting table suggestions for {num_comensales} pax: {e.message}")
        raise
    return [TableSuggestion(**r) for r in rows or []]


async def start_service(backend: BackendClient, mesa_id: str, data: ServiceStart):
    try:
        result = await backend.rpc("iniciar_servicio_mesa", {
            "p_mesa_id": mesa_id,
            "p_numero_comensales": data.numero_comensales,
            "p_reserva_id": data.reserva_id,
            "p_ingresos_estimados": data.ingresos_estimados,
        })
    except BackendError as e:
        logger.error(f"Error starting service at table {mesa_id}: {e.message}")
        raise
    logger.info(f"[SERVICIO] started at {mesa_id}")
    return result


async def finish_service(backend: BackendClient, mesa_id: str, data: ServiceFinish):
    try:
        result = await backend.rpc("finalizar_servicio_mesa", {
            "p_mesa_id": mesa_id,
            "p_ingresos_reales": data.ingresos_reales,
        })
    except BackendError as e:
        logger.error(f"Error finishing service at table {mesa_id}: {e.message}")
        raise
    logger.info(f"[SERVICIO] finished at {mesa_id}, table to cleaning")
    return result



# ── Combinations ─────────────────────────────────────────────────────────────
async def list_combinations(backend: BackendClient) -> list[dict]:
    return await backend.select(COMBINATIONS_TABLE, "*", filters=[("activa", "eq", True)],
                                order=[("created_at", False)]) or []


async def create_combination(backend: BackendClient, data: CombinationCreate) -> dict:
    try:
        created = await backend.insert(COMBINATIONS_TABLE, data.model_dump(mode="json", exclude_none=True))
    except BackendError as e:
        logger.error(f"Error creating table combination '{data.nombre_combinacion}': {e.message}")
        raise
    logger.info(f"[MESA] combination '{data.nombre_combinacion}': {data.mesa_principal_id} + "
                f"{', '.join(data.mesas_secundarias)} ({data.capacidad_total} pax)")
    return created


async def deactivate_combination(backend: BackendClient, combination_id: str) -> None:
    """Combinations are never deleted, only marked inactive."""
    await backend.update(COMBINATIONS_TABLE, {"activa": False}, filters=[("id", "eq", combination_id)],
                         single=False)
    logger.info(f"[MESA] combination {combination_id} deactivated")


async def restaurant_config(backend: BackendClient) -> dict:
    return await backend.select("restaurante_config", "*", single=True)
