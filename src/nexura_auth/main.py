# src/nexura_auth/main.py
"""Main entry point for the Nexura auth service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from nexura_auth.api import auth_router, users_router
from nexura_auth.api.providers import build_challenge_repository
from nexura_auth.core.exceptions import (
    AuthenticationError,
    AuthServiceError,
    InputValidationError,
    StorageUnavailableError,
)
from nexura_auth.core.logging import configure_logging
from nexura_auth.core.settings import settings
from nexura_auth.db.session import SessionLocal
from nexura_auth.repositories import SessionRepository
from nexura_auth.services import ExpiryCleanupWorker, SessionStore

logger = logging.getLogger(__name__)

STORAGE_RETRY_AFTER_SECONDS = 5


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.log_level)
    worker: ExpiryCleanupWorker | None = None
    if settings.cleanup_interval_seconds > 0:
        worker = ExpiryCleanupWorker(
            build_challenge_repository(SessionLocal),
            SessionStore(SessionRepository(SessionLocal)),
            settings.cleanup_interval_seconds,
        )
        await worker.start()
    app.state.cleanup_worker = worker
    try:
        yield
    finally:
        if worker is not None:
            await worker.stop()


# Initialize FastAPI app
app = FastAPI(
    title="Nexura Auth API",
    description="Wallet challenge/response authentication and session management",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router)
app.include_router(users_router)


@app.exception_handler(AuthServiceError)
async def auth_service_error_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
    """Map service errors to their status with a fixed, non-revealing message."""
    headers: dict[str, str] = {}
    if isinstance(exc, AuthenticationError):
        headers["WWW-Authenticate"] = "Bearer"
    elif isinstance(exc, StorageUnavailableError):
        headers["Retry-After"] = str(STORAGE_RETRY_AFTER_SECONDS)
    logger.info(
        "%s %s -> %d (%s: %s)",
        request.method,
        request.url.path,
        exc.status_code,
        type(exc).__name__,
        exc,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_detail},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed bodies and query strings with 400, without echoing input."""
    logger.info("%s %s -> 400 (%d validation error(s))", request.method, request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": InputValidationError.public_detail},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Nexura Auth API",
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("nexura_auth.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
