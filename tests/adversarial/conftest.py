"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition and timing tests.
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
from userauth.domain.passwords import PasswordHasher

pytestmark = pytest.mark.adversarial


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
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


@pytest.fixture
def users(pool: ConnectionPool) -> PostgresUserRepository:
    return PostgresUserRepository(pool)


@pytest.fixture
def tokens(pool: ConnectionPool) -> PostgresTokenRepository:
    return PostgresTokenRepository(pool)


@pytest.fixture(scope="module")
def hasher() -> PasswordHasher:
    """Production cost factor so bcrypt dominates timing."""
    return PasswordHasher(rounds=10)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty users and auth_tokens before each test."""
    with pool.connection() as conn:
        conn.execute("TRUNCATE users RESTART IDENTITY CASCADE")
        conn.commit()
    yield
