"""
RecipeBox Backend: FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the database, services, middleware,
       exception handlers and routers for one Settings object and returns
       the app. run() is the console entry point (uvicorn).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Access Log → CORS         │
    │                                                     │
    │  Routes:                                            │
    │    POST /signup   POST /login                       │
    │    GET/POST /recipes   GET/PUT /recipes/{id}        │
    │    POST /upload   GET /uploads/{filename}           │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400 {errors}   auth→401/400      │
    │    NotFound→404   Store/File→500   no route→404     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, check settings, create upload dir,
              create missing tables (AUTO_CREATE_SCHEMA)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipebox import __version__
from recipebox.config import Settings
from recipebox.database import Database
from recipebox.exceptions import (
    DuplicateEmailError,
    FieldError,
    FileStorageError,
    InvalidCredentialError,
    MissingCredentialError,
    NotFoundError,
    RecipeBoxError,
    StoreError,
    ValidationError,
)
from recipebox.middleware.logging import RequestLoggingMiddleware
from recipebox.middleware.request_id import RequestIDMiddleware, request_id_var
from recipebox.routes import auth, recipes, upload
from recipebox.services.file_service import FileService
from recipebox.services.recipe_service import RecipeService
from recipebox.services.token_service import TokenService
from recipebox.services.user_service import UserService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] recipebox.access: POST /login 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("RecipeBox Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Development defaults still work; make the problem loud
        logger.warning("%s", str(e))

    logger.info("Upload directory: %s", app.state.file_service.upload_dir)

    if settings.auto_create_schema:
        await database.create_schema()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("RecipeBox Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP status codes and JSON bodies.

    Handler table:
        ValidationError          → 400 {"errors": [...]} or {"error": msg}
        RequestValidationError   → 400 {"errors": [...]}
        DuplicateEmailError      → 400
        MissingCredentialError   → 401
        InvalidCredentialError   → 401 (InvalidTokenError → 400)
        NotFoundError            → 404
        StoreError               → 500, detail logged
        FileStorageError         → 500, detail logged
        HTTP 404/405 from router → 404 {"error": "Route not found"}
        Exception                → 500, stack trace logged

    Responses never contain stack traces, SQL or file paths.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Validation failed: %s", request_id_var.get(""), exc.fields or exc.message)
        if exc.errors:
            return JSONResponse(status_code=exc.status_code, content={"errors": exc.errors})
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON, wrongly typed fields or path parameters."""
        errors = []
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ())]
            location = loc[0] if loc else "body"
            path = ".".join(loc[1:]) or location
            errors.append(FieldError(path, err.get("msg", "Invalid value"), location=location))
        logger.info("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return JSONResponse(status_code=400, content={"errors": errors})

    @app.exception_handler(DuplicateEmailError)
    async def handle_duplicate_email(request: Request, exc: DuplicateEmailError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(MissingCredentialError)
    async def handle_missing_credential(request: Request, exc: MissingCredentialError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(InvalidCredentialError)
    async def handle_invalid_credential(request: Request, exc: InvalidCredentialError):
        # Covers InvalidTokenError, which carries its own status code
        return _error(exc.status_code, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error(
            "[%s] File storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RecipeBoxError)
    async def handle_app_error(request: Request, exc: RecipeBoxError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown path and unsupported method on a known path look the same
        if exc.status_code in (404, 405):
            return _error(404, "Route not found")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration for this app instance; read from the
                  environment when omitted.

    Returns:
        FastAPI app whose state holds settings, database and services.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="RecipeBox API",
        description="Personal recipe manager: accounts, recipes and recipe images.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Collaborators ─────────────────────────────────────────────────────
    token_service = TokenService.from_settings(settings)
    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_service = token_service
    app.state.user_service = UserService(token_service, bcrypt_rounds=settings.bcrypt_rounds)
    app.state.recipe_service = RecipeService()
    app.state.file_service = FileService.from_settings(settings)

    # ── Middleware (last added runs first) ────────────────────────────────
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers refuse credentials together with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(recipes.router)
    app.include_router(upload.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
