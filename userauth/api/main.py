"""
FastAPI application factory.

The module-level ``app`` is what an ASGI server loads. Tests call
create_app() directly and swap adapters through dependency_overrides.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from psycopg_pool import ConnectionPool

from userauth import __version__
from userauth.adapters.repository.postgres import run_migrations
from userauth.api.dependencies import get_pool
from userauth.api.errors import install_error_handlers
from userauth.api.v1 import router as v1_router
from userauth.config.settings import get_settings

logger = logging.getLogger(__name__)

API_PREFIX = "/api/1.0"

tags_metadata = [
    {
        "name": "v1",
        "description": "User accounts: signup, email activation, login and user management",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Own the connection pool for the lifetime of the process and migrate the schema."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    run_migrations(pool)
    app.state.pool = pool
    logger.info("userauth %s ready (pool %d..%d)", __version__, pool.min_size, pool.max_size)

    try:
        yield
    finally:
        pool.close()
        logger.info("Connection pool closed")


def create_app() -> FastAPI:
    """Build the application: routes under /api/1.0 plus the error envelope handlers."""
    app = FastAPI(
        title="userauth",
        description="User account API - signup with email activation, login and user management",
        version=__version__,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    install_error_handlers(app)
    app.include_router(v1_router, prefix=API_PREFIX)

    @app.get("/health")
    def health_check(pool: ConnectionPool = Depends(get_pool)) -> dict[str, str]:
        """Liveness check; a database error surfaces through the error envelope."""
        with pool.connection() as conn:
            conn.execute("SELECT 1")
        return {"status": "healthy"}

    return app


app = create_app()
