# app/routers/tables.py
"""Tables: floor layout, live state, seat suggestions, combinations and table service."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from app.database import get_backend, get_timers
from app.schemas.table import (
    CombinationCreate, ServiceFinish, ServiceStart, TableCreate, TableStateUpdate, TableSuggestion, TableUpdate,
)
from app.services.backend_client import BackendClient
from app.services.table_timer import TimerStore
from app.services import table_service

router = APIRouter()


@router.get("/tables", summary="All tables ordered by number")
async def list_tables(backend: BackendClient = Depends(get_backend)):
    return await table_service.list_tables(backend)


@router.get("/tables/states", summary="Active tables with their current state")
async def tables_with_states(backend: BackendClient = Depends(get_backend)):
    return await table_service.tables_with_states(backend)


@router.get("/tables/suggestions", response_model=list[TableSuggestion])
async def suggest_tables(comensales: int = Query(..., gt=0), zona: Optional[str] = None,
                         backend: BackendClient = Depends(get_backend)):
    """Seat suggestions ranked by the backend (single tables and combinations)."""
    return await table_service.suggest_tables(backend, comensales, zona)


@router.get("/tables/combinations", summary="Active table combinations")
async def list_combinations(backend: BackendClient = Depends(get_backend)):
    return await table_service.list_combinations(backend)


@router.post("/tables/combinations", status_code=201)
async def create_combination(body: CombinationCreate, backend: BackendClient = Depends(get_backend)):
    return await table_service.create_combination(backend, body)


@router.delete("/tables/combinations/{combination_id}", summary="Deactivate a combination")
async def deactivate_combination(combination_id: str, backend: BackendClient = Depends(get_backend)):
    await table_service.deactivate_combination(backend, combination_id)
    return {"id": combination_id, "status": "inactive"}


@router.get("/tables/{mesa_id}")
async def get_table(mesa_id: str, backend: BackendClient = Depends(get_backend)):
    return await table_service.get_table(backend, mesa_id)


@router.post("/tables", status_code=201)
async def create_table(body: TableCreate, backend: BackendClient = Depends(get_backend)):
    return await table_service.create_table(backend, body)


@router.patch("/tables/{mesa_id}")
async def update_table(mesa_id: str, body: TableUpdate, backend: BackendClient = Depends(get_backend)):
    return await table_service.update_table(backend, mesa_id, body)


@router.put("/tables/{mesa_id}/state", summary="Change a table's live state")
async def update_table_state(mesa_id: str, body: TableStateUpdate, backend: BackendClient = Depends(get_backend)):
    result = await table_service.update_table_state(backend, mesa_id, body)
    return {"mesa_id": mesa_id, "estado": body.estado.value, "result": result}


@router.post("/tables/{mesa_id}/service/start", summary="Seat guests and start the table timer")
async def start_service(mesa_id: str, body: ServiceStart, backend: BackendClient = Depends(get_backend),
                        timers: TimerStore = Depends(get_timers)):
    result = await table_service.start_service(backend, mesa_id, body)
    # Only start the clock once the backend accepted the seating
    timer = timers.start_timer(mesa_id, body.duration_minutes)
    return {"mesa_id": mesa_id, "result": result, "timer": timer}


@router.post("/tables/{mesa_id}/service/finish", summary="Close the service and stop the table timer")
async def finish_service(mesa_id: str, body: ServiceFinish, backend: BackendClient = Depends(get_backend),
                         timers: TimerStore = Depends(get_timers)):
    result = await table_service.finish_service(backend, mesa_id, body)
    timers.stop_timer(mesa_id)
    return {"mesa_id": mesa_id, "result": result, "timer": timers.get_timer(mesa_id)}
