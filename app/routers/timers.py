# app/routers/timers.py
"""Table timers: process-local occupancy clocks with a traffic-light status."""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from app.database import get_timers
from app.schemas.table_timer import TimerOut, TimerStart
from app.services.table_timer import TimerStore

router = APIRouter()


@router.get("/timers", response_model=list[TimerOut])
async def list_timers(timers: TimerStore = Depends(get_timers)):
    """All timers, active and stopped, in the order they were started."""
    return timers.timers()


@router.get("/timers/{table_id}", response_model=TimerOut)
async def get_timer(table_id: str, timers: TimerStore = Depends(get_timers)):
    timer = timers.get_timer(table_id)
    if not timer:
        raise HTTPException(status_code=404, detail=f"No timer for table '{table_id}'")
    return timer


@router.post("/timers/{table_id}/start", response_model=TimerOut, summary="Start or restart a table timer")
async def start_timer(table_id: str, body: Optional[TimerStart] = None, timers: TimerStore = Depends(get_timers)):
    """Overwrites any existing timer for the table (last write wins)."""
    return timers.start_timer(table_id, body.duration_minutes if body else None)


@router.post("/timers/{table_id}/stop", summary="Stop a table timer")
async def stop_timer(table_id: str, timers: TimerStore = Depends(get_timers)):
    timers.stop_timer(table_id)
    return {"table_id": table_id, "status": "stopped"}


@router.delete("/timers/{table_id}", summary="Remove a table timer")
async def remove_timer(table_id: str, timers: TimerStore = Depends(get_timers)):
    timers.remove_timer(table_id)
    return {"table_id": table_id, "status": "removed"}
