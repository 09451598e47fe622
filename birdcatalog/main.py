"""
Bird Catalogue — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn birdcatalog.main:app).
       Scaling out is uvicorn's `--workers N`.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain:                                   │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐         │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │         │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘         │
    │                                                      │
    │  Routes:                                             │
    │  /birds   /lists   /bird-lists   /health             │
    │                                                      │
    │  Exception Handlers (all return the error envelope): │
    │  Validation→400 │ NotFound→404 │ Conflict→409 │ 500  │
    └──────────────────────────────────────────────────────┘

Error envelope:
    {"statusCode": 404, "error": "Not Found", "message": "..."}

Lifecycle:
    Startup:   configure logging, create missing tables (CREATE_SCHEMA)
    Shutdown:  dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from birdcatalog import __version__
from birdcatalog.config import settings
from birdcatalog.database import create_schema, dispose_engine
from birdcatalog.exceptions import (
    BirdCatalogError,
    MalformedRequestError,
    ValidationError,
)
from birdcatalog.middleware.logging import RequestLoggingMiddleware
from birdcatalog.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from birdcatalog.routes import bird_lists, birds, health, lists
from birdcatalog.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] birdcatalog.access: GET /birds 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Code before `yield` runs on startup, code after it on shutdown."""
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Bird Catalogue API %s starting up...", __version__)

    if settings.create_schema:
        await create_schema()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Bird Catalogue API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    message: str,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """Build the `{statusCode, error, message}` envelope."""
    body = ErrorResponse(
        status_code=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True),
        headers=dict(headers) if headers else None,
    )


def request_validation_to_error(exc: RequestValidationError) -> BirdCatalogError:
    """
    FastAPI reports both unparsable JSON and schema failures as
    RequestValidationError; split them into the two 400 errors.
    """
    errors = exc.errors()
    for error in errors:
        if error.get("type") == "json_invalid":
            ctx = error.get("ctx") or {}
            reason = ctx.get("error")
            message = f"Request body is not valid JSON: {reason}" if reason else MalformedRequestError().message
            return MalformedRequestError(message=message)
    return ValidationError.from_pydantic_errors(errors)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        BirdCatalogError        → exc.status_code (400/404/409/500)
        RequestValidationError  → 400 (never FastAPI's default 422)
        StarletteHTTPException  → its own status (404 unknown route, 405 ...)
        Exception (fallback)    → 500

    Exception handlers never expose internal details (SQL, stack traces)
    in the response body; those are logged server-side.
    """

    @app.exception_handler(BirdCatalogError)
    async def handle_catalog_error(request: Request, exc: BirdCatalogError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid, type(exc).__name__, exc.message, exc.context,
                exc_info=exc,
            )
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        error = request_validation_to_error(exc)
        logger.warning("[%s] %s: %s", request_id_var.get(""), type(error).__name__, error.message)
        return error_response(error.status_code, error.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        return error_response(exc.status_code, message, headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, full stack trace in the server log only."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return error_response(500, "An unexpected error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Bird Catalogue API",
        description=(
            "Catalogue of bird species and subspecies, and of curated lists of "
            "birds such as regional checklists."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(birds.router)
    app.include_router(lists.router)
    app.include_router(bird_lists.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
