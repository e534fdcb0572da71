"""FastAPI app entry point for the tire shop lead-capture API."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tireshop.api.admin import auth_router
from tireshop.api.admin import router as admin_router
from tireshop.api.functions import router as functions_router
from tireshop.api.routes import router
from tireshop.config import get_settings, validate_settings
from tireshop.core.errors import (
    AuthenticationError,
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ProviderError,
    ValidationFailed,
    WizardError,
)
from tireshop.core.logging import log_error, log_request, log_response, logger, setup_logging
from tireshop.services.email import email_sender
from tireshop.services.nhtsa import nhtsa_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup / shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level)
    try:
        validate_settings()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise
    logger.info("Starting tire shop API...")
    yield
    logger.info("Shutting down...")
    await nhtsa_client.close()
    await email_sender.close()


app = FastAPI(
    title="Tire Shop API",
    description="Vehicle finder, tire quotes and service appointments",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Id"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    log_request(request.method, request.url.path)

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    log_response(request.method, request.url.path, response.status_code, duration_ms)

    return response


# -----------------------------------------------------------------------------
# Error mapping
# -----------------------------------------------------------------------------


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return JSONResponse(status_code=422, content={"detail": str(exc), "issues": exc.issues})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(WizardError)
async def wizard_handler(request: Request, exc: WizardError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_handler(request: Request, exc: PersistenceError):
    log_error(f"{exc.operation} on {exc.table} failed", exc.cause)
    return JSONResponse(
        status_code=503,
        content={"detail": "We couldn't save your request. Please try again."},
    )


@app.exception_handler(AuthenticationError)
async def authentication_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(AuthorizationError)
async def authorization_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(ProviderError)
async def provider_handler(request: Request, exc: ProviderError):
    log_error("Vehicle data provider failed", exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# Routes
app.include_router(router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(functions_router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "tireshop"}
