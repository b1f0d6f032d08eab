"""FastAPI application factory.

Main entry point for the TrackAcademia Web API.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trackacademia.bootstrap import Services, build_services
from trackacademia.config.app_config import load_app_config
from trackacademia.errors import (
    AccountAlreadyExists,
    AuthError,
    InvalidCredentials,
    NetworkError,
    PersistenceError,
    TrackAcademiaError,
    Unauthorized,
    UploadError,
    ValidationError,
    WeakPassword,
)
from trackacademia.web.routes import (
    auth_router,
    books_router,
    dashboard_router,
    health_router,
    lectures_router,
    profile_router,
    uploads_router,
)

logger = structlog.get_logger(__name__)

# Most specific class first; lookups walk the exception's MRO.
ERROR_STATUS: dict[type[TrackAcademiaError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    Unauthorized: status.HTTP_403_FORBIDDEN,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    AccountAlreadyExists: status.HTTP_409_CONFLICT,
    WeakPassword: status.HTTP_400_BAD_REQUEST,
    NetworkError: status.HTTP_503_SERVICE_UNAVAILABLE,
    AuthError: status.HTTP_400_BAD_REQUEST,
    PersistenceError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: TrackAcademiaError) -> int:
    """HTTP status for an application error."""
    if isinstance(exc, UploadError):
        return status.HTTP_400_BAD_REQUEST if exc.rejected else status.HTTP_502_BAD_GATEWAY
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_app_error(request: Request, exc: TrackAcademiaError) -> JSONResponse:
    status_code = status_for(exc)
    detail: dict[str, str] = {"message": str(exc), "error": type(exc).__name__}
    if isinstance(exc, ValidationError) and exc.field:
        detail["field"] = exc.field
    if isinstance(exc, AuthError) and exc.code:
        detail["code"] = exc.code

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "api_error",
        path=request.url.path,
        status=status_code,
        error=type(exc).__name__,
        message=str(exc),
    )
    return JSONResponse(status_code=status_code, content={"detail": detail})


def create_app(services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Pre-built services (tests); built from config at startup otherwise

    Returns:
        Configured FastAPI app instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Startup
        app.state.services = services or build_services()
        await app.state.services.start()
        logger.info(
            "api_startup",
            store=type(app.state.services.gateway.store).__name__,
            uploads_enabled=app.state.services.uploader is not None,
        )
        yield
        # Shutdown
        await app.state.services.aclose()
        logger.info("api_shutdown")

    app = FastAPI(
        title="TrackAcademia API",
        description="Personal study tracker: books, lectures and topics",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients; credentials travel as bearer tokens
    config = services.config if services else load_app_config()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.web.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.add_exception_handler(TrackAcademiaError, handle_app_error)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(dashboard_router)
    app.include_router(books_router)
    app.include_router(lectures_router)
    app.include_router(uploads_router)

    return app


# Default app instance for uvicorn
app = create_app()
