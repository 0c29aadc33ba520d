# app/schemas/table_timer.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.services.table_timer import TimerStatus


class TimerOut(BaseModel):
    id: str
    start_time: datetime
    duration: int
    is_active: bool
    elapsed_minutes: int
    status: TimerStatus

    class Config:
        from_attributes = True


class TimerStart(BaseModel):
    duration_minutes: Optional[int] = Field(default=None, ge=0)

    class Config:
        extra = "forbid"
