"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool
from starlette.exceptions import HTTPException as StarletteHTTPException

from registrar.adapters.repository import (
    InMemoryUserRepository,
    PostgresUserRepository,
    run_migrations,
)
from registrar.api.models import ErrorResponse, FieldError, HealthResponse, ValidationErrorResponse
from registrar.api.routes import router
from registrar.config.settings import Settings, get_settings
from registrar.domain.rules import field_names
from registrar.domain.screening import screen_registration

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "users",
        "description": "Registration API - Register, list and delete users",
    },
]

# Local development origins are always allowed.
LOCAL_ORIGIN_REGEX = r"^http://(localhost|127\.0\.0\.1)(:\d+)?$"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the user repository on startup (PostgreSQL pool or in-memory)
    - Runs migrations on startup (PostgreSQL only)
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    if settings.repository_backend == "memory":
        logger.info("Using in-memory user repository")
        app.state.repository = InMemoryUserRepository()
        logger.info("Application startup complete")
        yield
        logger.info("Shutting down application...")
        return

    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=True,
    )

    # Run migrations
    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store repository in app state for dependency injection
    app.state.repository = PostgresUserRepository(pool, settings.connection_warning_seconds)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="registrar",
    description="Registration API - Gmail sign-up with shared client/server validation rules",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_origin_regex=LOCAL_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(router)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log one line per request."""
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the {success, message} envelope."""
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


def _configured_settings(request: Request) -> Settings:
    """Settings as the routes see them (honours dependency overrides)."""
    provider = request.app.dependency_overrides.get(get_settings, get_settings)
    return provider()


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Render unparseable request bodies in the error envelope.

    A registration body that is missing, malformed, or not a JSON object
    is screened as an empty body, so the client gets the usual 400 list of
    required-field errors.
    """
    logger.info("Rejected request body for %s %s", request.method, request.url.path)
    if request.url.path == "/register":
        settings = _configured_settings(request)
        screening = screen_registration(
            {}, field_names(settings.registration_flow), settings.rule_set()
        )
        body = ValidationErrorResponse(
            errors=[FieldError(field=v.field, message=v.message) for v in screening.violations]
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())

    error = ErrorResponse(message="Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=error.model_dump(exclude_none=True)
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for unexpected errors.

    Error detail is only included in development; production responses
    carry the generic message alone.
    """
    logger.exception("Server error", exc_info=exc)
    detail = str(exc) if get_settings().environment == "development" else None
    body = ErrorResponse(message="Internal server error", error=detail)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Liveness probe.

    Returns 200 OK whenever the process is up; the database is not consulted.
    """
    return HealthResponse(message="API is running", timestamp=datetime.now(timezone.utc))
