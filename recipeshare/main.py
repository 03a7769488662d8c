"""
RecipeShare Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn recipeshare.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌──────────────┐ ┌─────────┐  │
    │  │ /add-recipe ...  │ │ /assets/...  │ │ /health │  │
    │  └──────────────────┘ └──────────────┘ └─────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Store/File→500│  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → storage directories → recipes table
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipeshare import __version__
from recipeshare.config import settings
from recipeshare.database import create_tables, dispose_engine
from recipeshare.exceptions import (
    FileError,
    NotFoundError,
    RecipeShareError,
    StoreError,
    ValidationError,
)
from recipeshare.middleware.logging import RequestLoggingMiddleware
from recipeshare.middleware.request_id import RequestIDMiddleware, request_id_var
from recipeshare.routes import assets, health, recipes
from recipeshare.services.file_service import file_service
from recipeshare.services.validation import request_errors_to_mapping

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Quiet per-operation chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Create the image directories
        3. Create the recipes table if it does not exist
    Shutdown:
        1. Dispose database engine (close all pooled connections)
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("RecipeShare Backend starting up...")

    file_service.ensure_directories()
    logger.info("Image storage: %s", file_service.storage_root)

    await create_tables()
    logger.info("Database ready: %s", settings.database_url.split("@")[-1])

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("RecipeShare Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError        → 400, body is the field→message mapping
        RequestValidationError → 400, same mapping (body FastAPI could not bind)
        NotFoundError          → 404 {"error": "Recipe not found"}
        StoreError             → 500 generic message, context logged
        FileError              → 500 generic message, context logged
        RecipeShareError       → 500 (catch-all for custom)
        Exception (fallback)   → 500 (unexpected errors, stack trace logged)

    Responses never contain stack traces, file paths or SQL.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.errors)
        return JSONResponse(status_code=400, content=exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_unparseable_request(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = request_errors_to_mapping(exc.errors())
        logger.warning("[%s] Unparseable request: %s", rid, errors)
        return JSONResponse(status_code=400, content=errors)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        logger.info("[%s] Not found: %s", rid, exc.context)
        return JSONResponse(
            status_code=404,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(FileError)
    async def handle_file_error(request: Request, exc: FileError):
        rid = request_id_var.get("")
        logger.error("[%s] File error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(RecipeShareError)
    async def handle_app_error(request: Request, exc: RecipeShareError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": "An internal error occurred. Please try again later.", "request_id": rid},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred. Please try again later.", "request_id": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Tests build a fresh instance per test and override get_db_session on it.
    """
    app = FastAPI(
        title="RecipeShare API",
        description=(
            "Backend for a recipe-sharing application: submit, list, edit and "
            "delete recipes with a thumbnail image."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(recipes.router)
    app.include_router(assets.router)
    app.include_router(health.router)

    return app


# uvicorn expects `recipeshare.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: `recipeshare` starts uvicorn with configured host/port."""
    import uvicorn

    uvicorn.run(
        "recipeshare.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
    )
