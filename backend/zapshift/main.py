"""
zapShift Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn zapshift.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routers:                                           │
    │  health · users · riders · parcels · payments ·     │
    │  trackings                                          │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ 400 │ 401 │ 403 │ 404 │ Internal→500 │ *→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → document store + ping →
              identity verifier → payment gateway
    Shutdown: close verifier → close document store
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from zapshift import __version__
from zapshift.config import settings
from zapshift.database import create_store
from zapshift.dependencies import build_identity_verifier, build_payment_gateway
from zapshift.exceptions import (
    ForbiddenError,
    InternalError,
    InvalidRequestError,
    NotFoundError,
    UnauthenticatedError,
    ZapShiftError,
)
from zapshift.middleware.logging import RequestLoggingMiddleware
from zapshift.middleware.request_id import RequestIDMiddleware, request_id_var
from zapshift.routes import health, parcels, payments, riders, trackings, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Replaced by RequestLoggingMiddleware, or too chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("stripe").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the shared document store and external-service clients on startup;
    release them on shutdown.

    Nothing here is fatal: an unreachable database or a missing key is
    logged, GET / keeps answering, and the affected routes return 500.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("zapShift Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    store = create_store(settings)
    app.state.store = store
    try:
        await store.ping()
        logger.info("Pinged deployment. Connected to MongoDB database '%s'", settings.database_name)
    except PyMongoError as e:
        logger.error("Document store unreachable at startup: %s", str(e))

    app.state.identity_verifier = build_identity_verifier(settings)
    app.state.payment_gateway = build_payment_gateway(settings)

    logger.info("Server listening on http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("zapShift Backend shutting down...")
    if app.state.identity_verifier is not None:
        app.state.identity_verifier.close()
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(exc: ZapShiftError, message: str, details: dict = None) -> JSONResponse:
    content = {
        "success": False,
        "error": exc.error_code,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=exc.status_code, content=content)


def _describe_validation_errors(exc: RequestValidationError) -> InvalidRequestError:
    missing = []
    invalid = []
    for error in exc.errors():
        # loc is ("body" | "query" | "path", field, ...)
        field = ".".join(str(part) for part in error.get("loc", ())[1:]) or "body"
        if error.get("type") == "missing":
            missing.append(field)
        else:
            invalid.append(field)

    if missing:
        message = "Missing required fields: " + ", ".join(missing)
    else:
        message = "Invalid fields: " + ", ".join(invalid)
    return InvalidRequestError(message=message, context={"fields": missing + invalid})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and one error body shape.

    Handler hierarchy:
        RequestValidationError  → 400 (FastAPI's default would be 422)
        InvalidRequestError     → 400
        UnauthenticatedError    → 401
        ForbiddenError          → 403
        NotFoundError           → 404
        InternalError           → 500, generic message, context logged
        Exception (fallback)    → 500, stack trace logged

    Security: 500 responses never include driver or SDK details.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        error = _describe_validation_errors(exc)
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), error.message)
        return _error_response(error, error.message, error.context)

    @app.exception_handler(InvalidRequestError)
    async def handle_invalid_request(request: Request, exc: InvalidRequestError):
        logger.warning("[%s] Invalid request: %s", request_id_var.get(""), exc.message)
        return _error_response(exc, exc.message)

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        return _error_response(exc, exc.message)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return _error_response(exc, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(exc, exc.message)

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return _error_response(exc, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "internal_server_error",
                "message": "Internal server error",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="zapShift API",
        description=(
            "Parcel delivery backend: parcels, users, riders, payments and tracking "
            "events, with Firebase sign-in verification and Stripe payment intents."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(riders.router)
    app.include_router(parcels.router)
    app.include_router(payments.router)
    app.include_router(trackings.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("zapshift.main:app", host=settings.host, port=settings.port)
