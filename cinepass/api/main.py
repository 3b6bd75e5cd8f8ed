"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from cinepass.adapters.repository.memory import (
    InMemoryCredentialStore,
    InMemoryVerificationCodeStore,
)
from cinepass.adapters.repository.postgres import (
    PostgresCredentialStore,
    PostgresVerificationCodeStore,
    run_migrations,
)
from cinepass.api.dependencies import build_notification_sender
from cinepass.api.errors import register_exception_handlers
from cinepass.api.routes import router
from cinepass.config.logging import configure_logging
from cinepass.config.settings import get_settings

configure_logging()
logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "accounts",
        "description": "Signup, email verification and sign-in",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations (postgres backend)
    - Builds the stores and notification sender used by the routes
    - Purges verification codes that expired while the app was down
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.credential_store = PostgresCredentialStore(pool)
        app.state.code_store = PostgresVerificationCodeStore(pool, ttl_seconds=settings.code_ttl_seconds)
    else:
        logger.warning("Using in-memory storage; accounts are lost on restart")
        app.state.credential_store = InMemoryCredentialStore()
        app.state.code_store = InMemoryVerificationCodeStore(ttl_seconds=settings.code_ttl_seconds)

    app.state.pool = pool
    app.state.notifier = build_notification_sender(settings)
    app.state.code_store.purge_expired()

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="cinepass",
    description="Account API - signup with emailed verification code, verify, sign in",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
    allow_credentials=True,
)
register_exception_handlers(app)
app.include_router(router)


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
