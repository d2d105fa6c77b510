"""
Application factory.

Run with: uvicorn careers.main:create_app --factory
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from careers.api.api import api_router
from careers.core.config import Settings, settings as default_settings
from careers.core.errors import GENERIC_INTERNAL_MESSAGE, error_response, register_exception_handlers
from careers.core.federated import FederatedIdentityVerifier
from careers.core.log import configure_logging
from careers.core.security import PasswordHasher, TokenIssuer
from careers.core.transport import TokenTransport
from careers.db.session import Database

logger = logging.getLogger("careers.http")


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    federated_verifier: Optional[FederatedIdentityVerifier] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    # Fails here, not on the first login, when SECRET_KEY is missing
    token_issuer = TokenIssuer(settings)
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create database tables on startup, release connections on shutdown."""
        database.create_all()
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Job board for candidates and employers",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.token_issuer = token_issuer
    app.state.token_transport = TokenTransport.from_settings(settings)
    app.state.federated_verifier = federated_verifier or FederatedIdentityVerifier.from_settings(settings)

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_boundary(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = error_response(500, GENERIC_INTERNAL_MESSAGE)

        duration_ms = (time.perf_counter() - started) * 1000
        response.headers["x-request-id"] = request_id
        logger.info(
            json.dumps(
                {
                    "event": "request_complete",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 3),
                }
            )
        )
        return response

    # CORS Middleware - allowlist from env (comma-separated)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {"message": f"Welcome to {settings.APP_NAME} API"}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Include API router with /api/v1 prefix
    app.include_router(api_router, prefix="/api/v1")

    return app
