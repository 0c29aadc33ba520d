# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import customers, health, metrics, occupancy, reservations, tables, timers
from app.database import create_context
from app.services.backend_client import BackendError
from app.config import settings
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Enigma Restaurant Ops API",
    description="Reservations, table occupancy timers, zone stats and CRM for the staff dashboard.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (dashboard runs on a separate origin) ──────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Health check and docs stay open. Set API_KEY in .env; leave empty to disable.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Backend Errors ───────────────────────────────────────────────────────────
@app.exception_handler(BackendError)
async def backend_exception_handler(request: Request, exc: BackendError):
    """A failed backend request ends that request only; the dashboard offers a retry."""
    if exc.code == "PGRST116":
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_502_BAD_GATEWAY
    logger.warning(f"Backend error on {request.url.path}: {exc!r}")
    return JSONResponse(status_code=code, content={"detail": exc.friendly_message, "code": exc.code})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(reservations.router, prefix="/api/v1", tags=["📅 Reservations"])
app.include_router(tables.router,       prefix="/api/v1", tags=["🍽️  Tables"])
app.include_router(timers.router,       prefix="/api/v1", tags=["⏱  Table Timers"])
app.include_router(occupancy.router,    prefix="/api/v1", tags=["📊 Zone Occupancy"])
app.include_router(metrics.router,      prefix="/api/v1", tags=["📈 Metrics"])
app.include_router(customers.router,    prefix="/api/v1", tags=["👤 Customers"])
app.include_router(health.router,       prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Restaurant Ops API starting up...")
    app.state.context = create_context()
    app.state.context.refresher.start()
    logger.info(f"🗄️  Backend: {settings.REST_URL}")
    logger.info(f"🌐 Listening on http://{settings.SERVICE_HOST}:{settings.SERVICE_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Restaurant Ops API shutting down...")
    context = getattr(app.state, "context", None)
    if context is not None:
        await context.dispose()
