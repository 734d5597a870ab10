"""
Jotter Backend: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance with its own engine, password hasher, and token service.
Who:   uvicorn (`uvicorn jotter.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────┐ ┌──────┐ ┌──────┐         │
    │  │ Req ID   │→│ Logging │→│ GZip │→│ CORS │         │
    │  └──────────┘ └─────────┘ └──────┘ └──────┘         │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────┐ ┌──────────────────────────┐     │
    │  │ POST /register│ │ /notes       [AuthGate]  │     │
    │  │ POST /login   │ │ /notes/{id}  [AuthGate]  │     │
    │  └───────────────┘ └──────────────────────────┘     │
    │                                                     │
    │  app.state: settings, engine, session_factory,      │
    │             password_hasher, token_service,         │
    │             auth_service                            │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → CREATE TABLE IF NOT EXISTS
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from jotter import __version__
from jotter.config import Settings, settings as default_settings
from jotter.database import (
    create_engine_from_settings,
    create_session_factory,
    dispose_engine,
    init_models,
)
from jotter.exceptions import (
    AuthenticationError,
    DuplicateUsernameError,
    HashingError,
    InvalidTokenError,
    JotterError,
    MissingTokenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from jotter.middleware.logging import RequestLoggingMiddleware
from jotter.middleware.request_id import RequestIDMiddleware, request_id_var
from jotter.routes import auth, health, notes
from jotter.services.auth_service import AuthService
from jotter.services.password_hasher import PasswordHasher
from jotter.services.token_service import TokenService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,  # Override any existing logging config
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    Startup sequence:
        1. Setup logging
        2. Validate critical configuration (logged, not fatal)
        3. Create tables when AUTO_CREATE_TABLES is enabled

    Shutdown sequence:
        1. Dispose database engine (close all pooled connections)
    """
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Jotter Backend starting up...")

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if app_settings.auto_create_tables:
        await init_models(app.state.engine)
        logger.info("Database schema ready")

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Jotter Backend shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# (status code, machine-readable error code) per client-facing exception
CLIENT_ERRORS = {
    ValidationError: (400, "validation_error"),
    DuplicateUsernameError: (400, "duplicate_username"),
    NotFoundError: (404, "not_found"),
    AuthenticationError: (401, "invalid_credentials"),
    MissingTokenError: (401, "missing_token"),
    InvalidTokenError: (403, "invalid_token"),
}


def resolve_client_error(exc: JotterError) -> Tuple[int, str]:
    """(status, code) of the closest mapped ancestor of `exc`'s class."""
    for cls in type(exc).__mro__:
        if cls in CLIENT_ERRORS:
            return CLIENT_ERRORS[cls]
    return 500, "server_error"


def _error_body(error: str, message: str, rid: str, details: Optional[dict] = None) -> dict:
    content = {"error": error, "message": message, "request_id": rid}
    if details:
        content["details"] = details
    return content


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        DuplicateUsernameError                   → 400
        AuthenticationError / MissingTokenError  → 401
        InvalidTokenError                        → 403
        NotFoundError                            → 404
        StorageError / HashingError              → 500 (generic message)
        JotterError (base)                       → 500
        Exception (fallback)                     → 500

    Exception handlers never expose internal details (stack traces, SQL,
    password hashes) in the API response. Details are logged server-side.
    """

    async def handle_client_error(request: Request, exc: JotterError):
        status_code, error = resolve_client_error(exc)
        rid = request_id_var.get("")
        logger.info("[%s] %s %s: %s", rid, request.method, request.url.path, exc.message)
        details = {"field": exc.field} if isinstance(exc, ValidationError) and exc.field else None
        return JSONResponse(
            status_code=status_code,
            content=_error_body(error, exc.message, rid, details),
        )

    for exc_class in CLIENT_ERRORS:
        app.add_exception_handler(exc_class, handle_client_error)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed JSON, wrong field types, or a non-integer note id."""
        rid = request_id_var.get("")
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        logger.info("[%s] Request validation failed on %s", rid, fields)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", "Missing or invalid fields", rid, {"fields": fields}),
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Database error: generic message to user, details logged server-side."""
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message, rid),
        )

    @app.exception_handler(HashingError)
    async def handle_hashing_error(request: Request, exc: HashingError):
        rid = request_id_var.get("")
        logger.error("[%s] Hashing error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message, rid),
        )

    @app.exception_handler(JotterError)
    async def handle_app_error(request: Request, exc: JotterError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later.", rid),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
                rid,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration to build the app from. Defaults to the
            environment-derived singleton; tests pass their own instance
            (database URL, signing secret, bcrypt cost).

    Returns:
        Fully configured FastAPI instance. Tables are created by the
        lifespan, or by calling `init_models(app.state.engine)` directly.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Jotter API",
        description="Multi-user notes backend: register, log in, and manage your own notes.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Process-wide state (read-only after this point) ───────────────────
    engine = create_engine_from_settings(app_settings)
    password_hasher = PasswordHasher(rounds=app_settings.bcrypt_rounds)
    token_service = TokenService(
        secret=app_settings.jwt_secret,
        algorithm=app_settings.jwt_algorithm,
        lifetime=timedelta(seconds=app_settings.token_ttl_seconds),
    )

    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.password_hasher = password_hasher
    app.state.token_service = token_service
    app.state.auth_service = AuthService(hasher=password_hasher, tokens=token_service)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = first to run)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=False,     # Bearer tokens travel in a header, not cookies
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
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `jotter.main:app` to be importable
app = create_app()
