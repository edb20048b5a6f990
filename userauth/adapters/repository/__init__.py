"""Repository adapters - Database implementations."""

from .postgres import PostgresTokenRepository, PostgresUserRepository, run_migrations

__all__ = ["PostgresTokenRepository", "PostgresUserRepository", "run_migrations"]
