"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Uniqueness:
-----------
The UNIQUE constraint on users.email is the arbiter of correctness.
insert() uses INSERT ... ON CONFLICT (email) DO NOTHING RETURNING, so a
request that loses a race against a concurrent insert gets no row back
(and the domain reports "already registered") instead of a raw
UniqueViolation.

Connection checkout:
--------------------
Every operation borrows a connection through checked_out(), which starts
a watchdog timer alongside the checkout. The timer logs an error if the
connection is held longer than the warning threshold, and is cancelled
in the same finally block that returns the connection to the pool.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from psycopg import Connection
from psycopg_pool import ConnectionPool

from registrar.domain.ports import NewUser, User

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, email, password_hash, first_name, last_name, created_at, updated_at"


@contextmanager
def checked_out(pool: ConnectionPool, warn_after: float = 5.0) -> Iterator[Connection[Any]]:
    """
    Borrow a connection from the pool with a leak watchdog.

    Args:
        pool: psycopg3 ConnectionPool
        warn_after: Seconds after which a still-held connection is logged

    Yields:
        A pooled connection; released and watchdog cancelled on exit
    """
    with pool.connection() as conn:
        watchdog = threading.Timer(
            warn_after,
            logger.error,
            args=("A connection has been checked out for more than %s seconds", warn_after),
        )
        watchdog.daemon = True
        watchdog.start()
        try:
            yield conn
        finally:
            watchdog.cancel()


def _row_to_user(row: tuple[Any, ...]) -> User:
    return User(
        id=row[0],
        email=row[1],
        password_hash=row[2],
        first_name=row[3],
        last_name=row[4],
        created_at=row[5],
        updated_at=row[6],
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, warn_after: float = 5.0) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            warn_after: Connection hold time (seconds) that triggers a warning
        """
        self._pool = pool
        self._warn_after = warn_after

    def insert(self, user: NewUser) -> User | None:
        """
        Atomically insert a user.

        Args:
            user: Normalized insert payload (email lower-cased, password hashed)

        Returns:
            Created User, or None if the email already exists
        """
        sql = f"""
            INSERT INTO users (email, password_hash, first_name, last_name)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_USER_COLUMNS}
        """

        with checked_out(self._pool, self._warn_after) as conn, conn.cursor() as cursor:
            cursor.execute(
                sql, (user.email, user.password_hash, user.first_name, user.last_name)
            )
            row = cursor.fetchone()
            conn.commit()

        if row is None:
            return None
        return _row_to_user(row)

    def find_by_email(self, email: str) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s"

        with checked_out(self._pool, self._warn_after) as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()

        return _row_to_user(row) if row is not None else None

    def list_all(self) -> list[User]:
        sql = f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC, id DESC"

        with checked_out(self._pool, self._warn_after) as conn, conn.cursor() as cursor:
            cursor.execute(sql)
            rows = cursor.fetchall()

        return [_row_to_user(row) for row in rows]

    def delete_by_email(self, email: str) -> bool:
        sql = "DELETE FROM users WHERE email = %s"

        with checked_out(self._pool, self._warn_after) as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            conn.commit()
            return cursor.rowcount > 0


MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Apply the users schema.

    Every *.sql file in migrations_dir runs in filename order, each on its
    own pooled connection. The files are idempotent, so this runs on every
    startup.

    Raises:
        RuntimeError: If a file fails; the failing file is named
    """
    sql_files = sorted(migrations_dir.glob("*.sql"))
    if not sql_files:
        logger.warning("No schema files found in %s", migrations_dir)
        return

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except Exception as e:
            logger.error("Schema file %s failed: %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info("Applied schema file %s", sql_file.name)
