"""
Product API Backend: FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌─────────────────────┐  │
    │  │  Req ID  │→│ Logging  │→│ Origin Gate → CORS  │  │
    │  └──────────┘ └──────────┘ └─────────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌─────────────────────┐ ┌─────────┐ ┌───────────┐  │
    │  │ /api/products (x6)  │ │ /health │ │ /docs     │  │
    │  └─────────────────────┘ └─────────┘ └───────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ DB→500       │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Import:
    1. Build the OpenAPI document from the route table (fatal on error)

    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Connect to the database and create missing tables
       (on failure: logged, app keeps serving in degraded mode)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine, init_models
from app.exceptions import (
    DatabaseError,
    DocumentationError,
    NotFoundError,
    ProductAPIError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.origin_gate import OriginGateMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.openapi import build_openapi_document
from app.routes import health, products
from app.schemas.product import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)

API_TITLE = "REST API Python / FastAPI"
API_DESCRIPTION = "API Docs for Products"
DOCS_TITLE = "REST API Documentation / FastAPI"

CORS_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
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


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Runs initialization on startup and cleanup on shutdown.

    The API document is not built here: it already exists on the app object,
    because create_app() refuses to return an app without one.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Product API starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    try:
        await init_models()
    except Exception as e:
        # Degraded mode: docs and health keep working, store calls return 500
        logger.error("Could not connect to the database: %s", str(e))

    logger.info("Allowed origin: %s", settings.frontend_url or "(none)")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Product API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Maps exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError         → 400 with the full field error collection
        NotFoundError           → 404 Not Found
        DatabaseError           → 500 (generic message, details logged)
        ProductAPIError (base)  → 500
        Exception (fallback)    → 500 (stack trace logged only)

    Origin refusals never get here; the origin gate answers them itself.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Every failing field is reported; the handler was not called."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation failed for fields: %s", rid, ", ".join(exc.errors))
        body = ValidationErrorResponse(message=exc.message, errors=exc.as_list(), request_id=rid)
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        body = ErrorResponse(error="not_found", message=exc.message, request_id=rid)
        return JSONResponse(status_code=404, content=body.model_dump())

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        # Full context server-side only
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        body = ErrorResponse(
            error="server_error",
            message="An internal error occurred. Please try again later.",
            request_id=rid,
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.exception_handler(ProductAPIError)
    async def handle_app_error(request: Request, exc: ProductAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        body = ErrorResponse(error="server_error", message=exc.message, request_id=rid)
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        body = ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred. Please try again or contact support.",
            request_id=rid,
        )
        return JSONResponse(status_code=500, content=body.model_dump())


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.

    Raises:
        DocumentationError: the route table's documentation metadata is
            malformed. Raised before any middleware or route is mounted, so
            no server ever runs with a partially built route table.
    """
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=__version__,
        docs_url=None,             # Swagger UI at /docs, registered below
        redoc_url="/redoc",        # ReDoc at /redoc
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Build API Documentation ───────────────────────────────────────────
    # FastAPI serves openapi_schema as-is once it is set
    try:
        app.openapi_schema = build_openapi_document(
            products.PRODUCT_ROUTES,
            prefix=products.PREFIX,
            title=API_TITLE,
            version=__version__,
            description=API_DESCRIPTION,
            tags=[products.PRODUCTS_TAG],
            schemas={"Product": products.PRODUCT_SCHEMA},
        )
    except DocumentationError as e:
        logger.critical("API documentation could not be generated: %s", e.message)
        raise

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → OriginGate → CORS → routes

    # CORS: answers preflights and adds headers for the admitted origin;
    # refused origins never get this far
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(OriginGateMiddleware, allowed_origin=settings.frontend_url)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(products.router)
    app.include_router(health.router)

    @app.get("/docs", include_in_schema=False)
    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(openapi_url=app.openapi_url, title=DOCS_TITLE)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
