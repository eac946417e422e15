"""FastAPI Application - Salon agenda HTTP entry point."""

import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agenda.config.settings import get_settings
from agenda.handlers.agenda import router as agenda_router
from agenda.services.supabase import AppointmentStoreError
from agenda.utils.logger import bind_request_context, get_logger, setup_logging

settings = get_settings()

setup_logging(settings.log_level, json_logs=not settings.is_development)

logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown of the agenda API."""
    logger.info(
        "agenda_api_starting",
        environment=settings.app_env,
        port=settings.api_port,
        appointments_table=settings.appointments_table,
        archive_on_cancel=settings.archive_on_cancel,
    )

    yield

    logger.info("agenda_api_stopped")


app = FastAPI(
    title="Salon Agenda API",
    description="Agenda views and activity reports for a single-provider salon",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["GET", "PATCH"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line with a request id and log the request outcome."""
    rid = bind_request_context(
        request.headers.get("X-Request-ID"),
        method=request.method,
        path=request.url.path,
    )
    started = time.perf_counter()

    response = await call_next(request)

    response.headers["X-Request-ID"] = rid
    logger.info(
        "request_completed",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return response


@app.exception_handler(AppointmentStoreError)
async def store_error_handler(request: Request, exc: AppointmentStoreError) -> JSONResponse:
    """The appointment store is an upstream dependency: its failures are 502."""
    logger.warning("appointment_store_unavailable", error=str(exc))
    return JSONResponse(status_code=502, content={"detail": str(exc)})


app.include_router(agenda_router)


@app.get("/")
async def root() -> dict:
    return {"message": "Salon Agenda API", "version": VERSION, "docs": "/docs"}


@app.get("/health")
async def health_check() -> dict:
    """Liveness plus whether store credentials are configured."""
    return {
        "status": "healthy",
        "environment": settings.app_env,
        "version": VERSION,
        "store_configured": bool(
            settings.supabase_url
            and (settings.supabase_service_key or settings.supabase_key)
        ),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "agenda.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
