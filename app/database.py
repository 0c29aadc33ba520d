# app/database.py
"""
Backend connection and per-application state.

The hosted backend is the source of truth; nothing is persisted locally.
`AppContext` owns the only process-local state (the table timers) together
with the HTTP client, and lives on `app.state.context` from startup to
shutdown. Routers reach it through the FastAPI dependencies below.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Request

from app.config import settings
from app.services.backend_client import BackendClient
from app.services.table_timer import TimerStore
from app.services.timer_refresher import TimerRefresher


@dataclass
class AppContext:
    backend: BackendClient
    timers: TimerStore
    refresher: TimerRefresher

    async def dispose(self):
        """Stop the refresher first so no tick can run against a closed context."""
        await self.refresher.stop()
        await self.backend.close()


def create_backend_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> BackendClient:
    return BackendClient(settings.REST_URL, settings.BACKEND_HEADERS, transport=transport)


def create_context(backend: Optional[BackendClient] = None) -> AppContext:
    timers = TimerStore(default_duration=settings.TIMER_DEFAULT_DURATION_MIN)
    return AppContext(
        backend=backend or create_backend_client(),
        timers=timers,
        refresher=TimerRefresher(timers, interval_seconds=settings.TIMER_REFRESH_SECONDS),
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_backend(request: Request) -> BackendClient:
    """FastAPI dependency: the shared backend client."""
    return request.app.state.context.backend


def get_timers(request: Request) -> TimerStore:
    """FastAPI dependency: the process-local timer store."""
    return request.app.state.context.timers
