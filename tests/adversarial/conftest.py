"""
Shared fixtures for adversarial tests.

Provides a PostgreSQL pool (skipped when no database is reachable) for
the race condition tests that exercise the real uniqueness constraint.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from registrar.adapters.repository.postgres import run_migrations
from registrar.config.settings import get_settings


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=20,
        open=True,
    )
    try:
        pool.wait(timeout=2.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_pool(pool: ConnectionPool) -> Generator[ConnectionPool, None, None]:
    """Pool with an empty users table."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
    yield pool
