"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jixify.core.config import Settings, get_settings
from jixify.core.logging import configure_logging, get_logger
from jixify.domain.exceptions import JixifyError
from jixify.infrastructure.api.errors import status_code_for
from jixify.infrastructure.persistence.database import DatabaseManager, init_database

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging, initializes the database on startup and closes it
    on shutdown.
    """
    settings: Settings = app.state.settings
    db: DatabaseManager = app.state.db

    configure_logging(settings)
    logger.info(
        "Starting Jixify",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database(db)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down Jixify")
    await db.disconnect()
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use. Defaults to the cached process settings.
            Every request dependency and the database manager read this
            instance from ``app.state``.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Account registration, email verification and chat proxy",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = DatabaseManager(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register root and health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/", tags=["health"])
    async def root():
        """Service banner."""
        return {"status": "ok", "api": "jixify backend"}

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check
        database connectivity.
        """
        return {
            "status": "healthy",
            "service": "Jixify",
            "version": app.state.settings.app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint, including database connectivity."""
        db_healthy = await app.state.db.check_connection()

        if db_healthy:
            return {
                "status": "ready",
                "service": "Jixify",
                "version": app.state.settings.app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "service": "Jixify",
                "database": "disconnected",
            },
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from jixify.infrastructure.api.routes import auth_router, chat_router

    prefix = app.state.settings.api_prefix

    app.include_router(auth_router, prefix=prefix, tags=["auth"])
    app.include_router(chat_router, prefix=prefix, tags=["chat"])


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers.

    Domain errors become ``{"error": message}`` with their mapped status.
    Malformed request bodies are answered with 400 rather than 422.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(JixifyError)
    async def jixify_error_handler(request: Request, exc: JixifyError):
        status_code = status_code_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed",
                path=str(request.url.path),
                method=request.method,
                error=exc.message,
                exc_type=type(exc).__name__,
                cause=repr(exc.__cause__) if exc.__cause__ else None,
            )
        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Request validation failed",
            path=str(request.url.path),
            error_count=len(exc.errors()),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if app.state.settings.debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request, call_next):
        """Log each request and propagate its correlation ID."""
        from jixify.core.logging import (
            bind_correlation_id,
            clear_context,
            new_correlation_id,
        )

        correlation_id = request.headers.get("X-Correlation-ID") or new_correlation_id()
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
