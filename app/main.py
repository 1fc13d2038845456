"""Rentline ASGI app: factory, lifespan and health probes."""

import asyncio
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.config import settings
from app.core.background_tasks import start_lifecycle_scheduler, stop_lifecycle_scheduler
from app.core.exceptions import AppException
from app.core.immutability import register_immutability_enforcement
from app.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.database import close_db, init_db, ping_db

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create dev tables and run the lifecycle sweep for the app's lifetime."""
    if settings.debug:
        await init_db()

    sweep_task: asyncio.Task | None = None
    if settings.lifecycle_sweep_enabled:
        sweep_task = asyncio.create_task(start_lifecycle_scheduler())
    logger.info(f"{settings.app_name} {settings.app_version} started ({settings.environment})")

    yield

    stop_lifecycle_scheduler()
    if sweep_task:
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass
    await close_db()


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render business errors as ``{"detail": ...}`` with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


def _add_middleware(app: FastAPI) -> None:
    # Last added runs first: security headers wrap everything, gzip is innermost
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)


def create_application() -> FastAPI:
    """Build the app with its routers, middleware and error handler."""
    register_immutability_enforcement()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Rentline - booking lifecycle for long-term rentals",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.add_exception_handler(AppException, app_exception_handler)
    _add_middleware(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check() -> dict:
        """Liveness: the process is up."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @app.get("/health/ready")
    async def readiness_check() -> dict:
        """Readiness: the database answers. 503 otherwise."""
        await ping_db()
        return {"status": "ready"}

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
    )
