"""
Shared fixtures for adversarial tests.

Provides a real-database pool for race condition tests (skipped when
PostgreSQL is unreachable) and a mocked pool for timing tests.
"""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
        kwargs={"connect_timeout": 2},
    )
    try:
        pool.wait(timeout=5.0)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty every table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM email_verifications")
        conn.execute("DELETE FROM waitlist")
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield


@pytest.fixture
def mock_pool() -> MagicMock:
    """Pool whose cursor finds no rows and affects none."""
    pool = MagicMock()
    cursor = pool.connection.return_value.__enter__.return_value.cursor.return_value.__enter__.return_value
    cursor.fetchone.return_value = None
    cursor.rowcount = 0
    return pool
