"""
Main Blog Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires logging, middleware, exception handlers, the static
       uploads mount and the routers; lifespan() opens and closes resources.
Who:   uvicorn (uvicorn mainblog.main:app, or python -m mainblog).

Application Architecture:
    ┌───────────────────────────────────────────────────────┐
    │                     FastAPI App                       │
    │                                                       │
    │  Middleware:  Req ID → Logging → GZip → CORS          │
    │                                                       │
    │  Routes:                                              │
    │    POST /register        POST /login                  │
    │    POST /blogs/create    GET  /blogs                  │
    │    GET  /blogs/search    PUT  /blogs/update/{id}      │
    │    DELETE /blogs/{id}    GET  /health                 │
    │    GET  /uploads/*  (static files)                    │
    │                                                       │
    │  Exception Handlers:                                  │
    │    Validation/Auth/Conflict→400  NotFound→404  *→500  │
    └───────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → upload directory → create missing tables
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from mainblog import __version__
from mainblog.config import settings
from mainblog.database import create_tables, dispose_engine
from mainblog.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    FileStorageError,
    MainBlogError,
    NotFoundError,
    ValidationError,
)
from mainblog.middleware.logging import RequestLoggingMiddleware
from mainblog.middleware.request_id import RequestIDMiddleware, request_id_var
from mainblog.routes import auth, blogs, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] mainblog.services.blog_service: Blog created: ...
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that report every request or statement at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Ensure the upload directory exists
        3. Create missing tables (settings.db_create_tables)
    Shutdown:
        1. Dispose database engine (close all pooled connections)
    """
    setup_logging()
    logger.info("Main Blog backend starting up...")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", upload_dir.resolve())

    if settings.db_create_tables:
        try:
            await create_tables()
            logger.info("Connected to database; tables ready")
        except Exception as e:
            # The server keeps running; requests will fail with 500 until the
            # database becomes reachable, and /health reports it
            logger.error("Could not connect to database: %s", str(e))

    logger.info("Server is running on http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Main Blog backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, exc: MainBlogError, details: bool = False) -> JSONResponse:
    content = {
        "error": error,
        "message": exc.message,
        "request_id": request_id_var.get(""),
    }
    if details and exc.context:
        content["details"] = exc.context
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError         → 400 (with the missing field names)
        RequestValidationError  → 400 (malformed JSON body)
        AuthenticationError     → 400
        ConflictError           → 400
        NotFoundError           → 404
        FileStorageError        → 500
        DatabaseError           → 500 (operation message, cause logged)
        MainBlogError (base)    → 500
        Exception (fallback)    → 500

    Internal details (stack traces, SQL, file paths) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(400, "validation_error", exc, details=True)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        logger.warning("[%s] Malformed request body: %s", rid, fields)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Please fill all the required fields",
                "details": {"fields": fields},
                "request_id": rid,
            },
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info("[%s] Login rejected: %s", request_id_var.get(""), exc.context.get("reason"))
        return _error_response(400, "invalid_credentials", exc)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(400, "conflict", exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error("[%s] File storage error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc)

    @app.exception_handler(MainBlogError)
    async def handle_app_error(request: Request, exc: MainBlogError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    Tests build their own instance and override get_db_session on it.
    """
    app = FastAPI(
        title="Main Blog API",
        description="User registration/login and blog posts with optional image uploads.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executed in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(blogs.router)
    app.include_router(health.router)

    # ── Static Uploads ────────────────────────────────────────────────────
    # StaticFiles checks the directory at construction, so create it first
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=str(upload_dir)),
        name="uploads",
    )

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
