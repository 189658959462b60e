#!/usr/bin/env python3
"""
Registration API - HTTP layer for the camp registration engine.

Serves the registration UI. Each user works through a server-side
registration session that talks to the upstream registration API on their
behalf.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from enrollment.config import ConfigError
from enrollment.config.settings import get_settings
from enrollment.errors import (
    EnrollmentError,
    FieldValueError,
    GatewayError,
    InvalidTransitionError,
    RegistrationClosedError,
    SelectionError,
    SessionClosedError,
)
from enrollment.logging_config import configure_logging, get_logger, resolve_level

from .dependencies import registry

# Format: 2026-01-06T14:05:52Z [api] LEVEL message
configure_logging(source="api", level=resolve_level(get_settings().log_level))
logger = get_logger(__name__)

# Most specific first
_ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (RegistrationClosedError, 403),
    (SessionClosedError, 409),
    (InvalidTransitionError, 409),
    (SelectionError, 422),
    (FieldValueError, 422),
    (GatewayError, 502),
    (EnrollmentError, 400),
]


def status_for(exc: Exception) -> int:
    for error_type, status in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()
    logger.info(f"Registration API starting, upstream {settings.gateway_base_url}")

    yield

    await registry.close_all()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Registration API", description="Camp registration session API", lifespan=lifespan)

    @app.exception_handler(EnrollmentError)
    async def enrollment_error_handler(request: Request, exc: EnrollmentError) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed upstream: {exc}")
        return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        logger.error(f"Invalid site configuration: {exc}")
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "error": type(exc).__name__, "keys": list(exc.keys)},
        )

    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    from .routers import registration

    app.include_router(registration.router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "registration-api"}

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=8000)
