"""
FastAPI application entry point for the calendar backend.

This module initializes the FastAPI application with:
- CORS middleware for the single-page frontend
- Exception handlers for consistent error responses
- Startup/shutdown handling of the database engine
- Logging configuration

Environment Variables:
    CALENDAR_DB_URL: SQLAlchemy database URL
    CALENDAR_CORS_ORIGINS: Comma-separated allowed origins (default: "*")
    CALENDAR_ENV: Environment (production/development, default: development)
    CALENDAR_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL, default: INFO)
"""

from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from backend.src.config.settings import get_settings
from backend.src.db.database import init_db, dispose_engine
from backend.src.utils.logging_config import init_logging, get_logger


APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    - Startup: Create tables when running on SQLite (PostgreSQL uses Alembic)
    - Shutdown: Dispose of the database engine

    Args:
        app: FastAPI application instance

    Yields:
        Control to the application
    """
    logger = get_logger("api")
    settings = get_settings()
    logger.info(f"Starting calendar backend ({settings.environment})")

    if settings.is_sqlite:
        logger.info("SQLite database detected, creating tables")
        init_db()

    yield

    logger.info("Shutting down calendar backend")
    dispose_engine()


# Initialize logging before creating app
init_logging()

app = FastAPI(
    title="Calendar API",
    description="Backend API for the calendar application. "
                "Stores calendar events and materializes recurring series.",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request payload validation errors.

    Args:
        request: HTTP request
        exc: FastAPI RequestValidationError

    Returns:
        JSON response with validation error details
    """
    details = jsonable_encoder(exc.errors())
    logger = get_logger("api")
    logger.warning(
        "Request validation error",
        extra={"extra_fields": {
            "path": request.url.path,
            "method": request.method,
            "errors": details,
        }},
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": "Request validation failed",
            "details": details,
        }
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors raised outside request parsing.

    Args:
        request: HTTP request
        exc: Pydantic ValidationError

    Returns:
        JSON response with validation error details
    """
    details = jsonable_encoder(exc.errors())
    logger = get_logger("api")
    logger.warning(
        "Validation error",
        extra={"extra_fields": {
            "path": request.url.path,
            "method": request.method,
            "errors": details,
        }},
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": "Request validation failed",
            "details": details,
        }
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """
    Handle SQLAlchemy database errors.

    Args:
        request: HTTP request
        exc: SQLAlchemy exception

    Returns:
        JSON response with database error message
    """
    logger = get_logger("db")
    logger.error(
        "Database error",
        extra={"extra_fields": {
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        }},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Database Error",
            "message": "An error occurred while accessing the database. "
                      "Please try again later.",
        }
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Handle all other unhandled exceptions.

    Args:
        request: HTTP request
        exc: Unhandled exception

    Returns:
        JSON response with generic error message
    """
    logger = get_logger("api")
    logger.error(
        "Unhandled exception",
        extra={"extra_fields": {
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error": str(exc),
        }},
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later.",
        }
    )


# Health check endpoint


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status and application information
    """
    return {
        "status": "healthy",
        "service": "calendar-backend",
        "version": APP_VERSION,
    }


# API routers
from backend.src.api import events

app.include_router(events.router, prefix="/api")


@app.get("/", tags=["Root"])
async def root() -> Dict[str, str]:
    """
    Root endpoint with API information.

    Returns:
        API metadata and documentation links
    """
    return {
        "message": "Calendar API",
        "version": APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
    }
