"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.adapters.session.memory import InMemoryAttemptStateStore
from src.api.functions import router as functions_router
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Waitlist registration and email verification",
    },
    {
        "name": "admin",
        "description": "Read-only admin view of waitlist signups",
    },
    {
        "name": "functions",
        "description": "Secret-protected callable endpoints",
    },
]


def create_pool(settings: Settings) -> ConnectionPool:
    """
    Create the connection pool with explicit sizing and timeouts.

    ``network_timeout_seconds`` bounds connection setup, pool checkout
    and every statement.
    """
    timeout = settings.network_timeout_seconds
    return ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        timeout=timeout,
        kwargs={
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the per-session attempt state store
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    pool = create_pool(settings)

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store shared resources in app state for dependency injection
    app.state.pool = pool
    app.state.attempt_store = InMemoryAttemptStateStore(window_seconds=settings.rate_limit_window_seconds)

    if not settings.waitlist_enabled:
        logger.warning("Waitlist persistence disabled; signups will not be recorded")
    if not settings.function_secret:
        logger.warning("FUNCTION_SECRET not set; /send-verification will reject every call")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="onetalk-waitlist",
    description="Onetalk waitlist API - Registration, admin listing and email verification",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(v1_router, prefix="/v1")
app.include_router(functions_router)


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
