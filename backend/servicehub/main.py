"""
ServiceHub Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn servicehub.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────────┐ ┌──────────┐ ┌──────────┐ ┌──────────┐  │
    │  │ Rate Limit │→│ Req ID   │→│ Logging  │→│ GZip/CORS│  │
    │  └────────────┘ └──────────┘ └──────────┘ └──────────┘  │
    │                                                          │
    │  Routes (/api):                                          │
    │  customers · locations · services · products             │
    │  appointments · workorders · invoices · payments         │
    │  notifications · dashboard               + GET /health   │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ ServiceHubError→exc.status_code │ request→400 │ 500│  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Every error, like every success, is the ApiResponse envelope:
    {"success": false, "data": null, "message": "...", "errors": [...]}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from servicehub import __version__
from servicehub.config import settings
from servicehub.database import dispose_engine
from servicehub.exceptions import RateLimitExceededError, ServiceHubError
from servicehub.middleware.logging import RequestLoggingMiddleware
from servicehub.middleware.rate_limit import RateLimitMiddleware
from servicehub.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from servicehub.routes import (
    appointments,
    customers,
    dashboard,
    health,
    invoices,
    locations,
    notifications,
    payments,
    products,
    services,
    work_orders,
)
from servicehub.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Request ids are carried in the message by the middleware and handlers.
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
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration checks, banner.
    Shutdown: dispose the database engine (close pooled connections).
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("ServiceHub Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report the problem
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if not settings.require_authentication:
        logger.warning(
            "Authentication is not required: callers are trusted to send %s / %s headers",
            settings.tenant_header,
            settings.user_header,
        )

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("ServiceHub Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _envelope(status_code: int, message: str, errors: List[str], headers=None) -> JSONResponse:
    body = ApiResponse.fail(message, errors).model_dump(mode="json", by_alias=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _describe_validation_error(error: dict) -> str:
    # ("body", "customerId") → "customerId: Field required"
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    return f"{field}: {error.get('msg', 'Invalid value')}" if field else error.get("msg", "Invalid value")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the failed envelope.

    Handler hierarchy:
        ValidationError / BusinessRuleError → 400
        UnauthorizedError                   → 401
        NotFoundError                       → 404
        RateLimitExceededError              → 429 + Retry-After
        DatabaseError                       → 500 (generic message)
        RequestValidationError (FastAPI)    → 400, one message per field
        Exception (fallback)                → 500 (generic message)

    Stack traces, SQL and internal context are logged, never returned.
    """

    @app.exception_handler(ServiceHubError)
    async def handle_service_error(request: Request, exc: ServiceHubError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return _envelope(exc.status_code, GENERIC_ERROR_MESSAGE, [GENERIC_ERROR_MESSAGE])

        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        return _envelope(exc.status_code, exc.message, exc.errors, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        messages = [_describe_validation_error(error) for error in exc.errors()]
        logger.warning("[%s] Request validation failed: %s", rid, "; ".join(messages))
        return _envelope(400, "Validation failed", messages)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _envelope(500, GENERIC_ERROR_MESSAGE, [GENERIC_ERROR_MESSAGE])


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="ServiceHub API",
        description=(
            "Multi-tenant field-service backend: customers, locations, service catalog, "
            "products, appointments, work orders, invoices, payments, notifications "
            "and dashboard statistics."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(customers.router)
    app.include_router(locations.router)
    app.include_router(services.router)
    app.include_router(products.router)
    app.include_router(appointments.router)
    app.include_router(work_orders.router)
    app.include_router(invoices.router)
    app.include_router(payments.router)
    app.include_router(notifications.router)
    app.include_router(dashboard.router)

    return app


app = create_app()
