"""
Shared fixtures for integration tests.

Requires PostgreSQL at DATABASE_URL (see userauth.config.settings).
Every test in this directory is skipped when the database is unreachable.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from userauth.adapters.repository.postgres import (
    PostgresTokenRepository,
    PostgresUserRepository,
    run_migrations,
)
from userauth.config.settings import get_settings


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool and run migrations once per session."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    try:
        pool.wait(timeout=3.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty the users table (and, by cascade, auth_tokens) before each test."""
    with pool.connection() as conn:
        conn.execute("TRUNCATE users RESTART IDENTITY CASCADE")
        conn.commit()
    yield


@pytest.fixture
def pg_users(pool: ConnectionPool) -> PostgresUserRepository:
    return PostgresUserRepository(pool)


@pytest.fixture
def pg_tokens(pool: ConnectionPool) -> PostgresTokenRepository:
    return PostgresTokenRepository(pool)
