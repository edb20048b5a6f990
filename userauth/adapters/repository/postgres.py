"""
PostgreSQL repository adapters - Implement the UserRepository and
TokenRepository protocols.

This module provides the PostgreSQL implementation of the domain's
repository ports using psycopg3 with raw SQL.

Uniqueness of username and email is enforced by UNIQUE constraints on the
users table. Inserts use ON CONFLICT DO NOTHING and updates translate a
UniqueViolation into None, so a lost race surfaces as a plain "taken"
result instead of an exception.
"""

import logging
from importlib import resources

from psycopg import errors
from psycopg_pool import ConnectionPool

from userauth.domain.ports import User

logger = logging.getLogger(__name__)

_USER_COLUMNS = (
    "id, username, email, password_hash, inactive, activation_token, created_at, updated_at"
)


def _row_to_user(row: tuple | None) -> User | None:
    if row is None:
        return None
    return User(
        id=row[0],
        username=row[1],
        email=row[2],
        password_hash=row[3],
        inactive=row[4],
        activation_token=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def _fetch_one(self, where: str, value: object) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE {where} = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value,))
            return _row_to_user(cursor.fetchone())

    def find_by_id(self, user_id: int) -> User | None:
        return self._fetch_one("id", user_id)

    def find_by_username(self, username: str) -> User | None:
        return self._fetch_one("username", username)

    def find_by_email(self, email: str) -> User | None:
        return self._fetch_one("email", email)

    def find_by_activation_token(self, token: str) -> User | None:
        return self._fetch_one("activation_token", token)

    def create(
        self, username: str, email: str, password_hash: str, activation_token: str
    ) -> User | None:
        """
        Insert a new inactive user.

        ON CONFLICT DO NOTHING without a target covers both the username and
        the email constraint; no row returned means one of them fired.

        Returns:
            The created user, or None if username or email is taken
        """
        sql = f"""
            INSERT INTO users (username, email, password_hash, inactive, activation_token)
            VALUES (%s, %s, %s, TRUE, %s)
            ON CONFLICT DO NOTHING
            RETURNING {_USER_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (username, email, password_hash, activation_token))
            row = cursor.fetchone()
            conn.commit()
            return _row_to_user(row)

    def activate(self, user_id: int) -> bool:
        """
        Flip a user to active and clear its token.

        The WHERE clause on inactive makes the transition happen at most
        once even when two activations race.
        """
        sql = """
            UPDATE users
            SET inactive = FALSE, activation_token = NULL, updated_at = NOW()
            WHERE id = %s AND inactive = TRUE
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id,))
            conn.commit()
            return cursor.rowcount == 1

    def update(
        self, user_id: int, username: str | None = None, email: str | None = None
    ) -> User | None:
        """
        Change username and/or email; unchanged columns keep their value.

        Returns:
            The updated user, or None if the row is gone or a UNIQUE
            constraint rejected the new value
        """
        sql = f"""
            UPDATE users
            SET username = COALESCE(%s, username),
                email = COALESCE(%s, email),
                updated_at = NOW()
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            try:
                cursor.execute(sql, (username, email, user_id))
            except errors.UniqueViolation:
                conn.rollback()
                logger.info("Update of user %s rejected by uniqueness constraint", user_id)
                return None
            row = cursor.fetchone()
            conn.commit()
            return _row_to_user(row)

    def delete(self, user_id: int) -> bool:
        """Delete a user; auth_tokens rows go with it (ON DELETE CASCADE)."""
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM users WHERE id = %s", (user_id,))
            conn.commit()
            return cursor.rowcount == 1

    def list_active_page(self, offset: int, limit: int) -> tuple[list[User], int]:
        page_sql = f"""
            SELECT {_USER_COLUMNS} FROM users
            WHERE inactive = FALSE
            ORDER BY id
            LIMIT %s OFFSET %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM users WHERE inactive = FALSE")
            total = cursor.fetchone()[0]
            cursor.execute(page_sql, (limit, offset))
            users = [_row_to_user(row) for row in cursor.fetchall()]
            return users, total


class PostgresTokenRepository:
    """Implements TokenRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create_token(self, token: str, user_id: int) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                "INSERT INTO auth_tokens (token, user_id) VALUES (%s, %s)",
                (token, user_id),
            )
            conn.commit()

    def find_user_id(self, token: str) -> int | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT user_id FROM auth_tokens WHERE token = %s", (token,))
            row = cursor.fetchone()
            return row[0] if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Apply the bundled schema migrations, in filename order.

    Migration scripts are idempotent (IF NOT EXISTS), so running them on
    every startup is safe. All scripts run in one transaction: a failing
    script leaves the schema untouched.

    Raises:
        RuntimeError: If a script fails
    """
    scripts = sorted(
        (entry for entry in resources.files(__package__).joinpath("migrations").iterdir()
         if entry.name.endswith(".sql")),
        key=lambda entry: entry.name,
    )
    if not scripts:
        logger.info("No migration scripts bundled")
        return

    with pool.connection() as conn:
        for script in scripts:
            try:
                conn.execute(script.read_text(encoding="utf-8"))
            except errors.Error as e:
                logger.error("Migration %s failed: %s", script.name, e)
                raise RuntimeError(f"Database migration failed: {script.name}") from e
            logger.info("Applied migration %s", script.name)
