"""
PostgreSQL repository adapters - Implement WaitlistStore and VerificationLinkIssuer.

This module provides the PostgreSQL implementations of the domain's
persistence ports using psycopg3 with raw SQL.

Waitlist records are insert-only: the store assigns the identifier and
the server-side ``timestamp`` (NOW()), which is distinct from the
client-supplied ``created_at``. No update path exists.

Verification tokens are single-use: consuming a token stamps
``used_at`` in the same statement that reads it, so two concurrent
confirmations cannot both succeed.
"""

import logging
import secrets
import uuid
from datetime import datetime
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import VerificationLinkError, WaitlistStoreError
from src.domain.models import WaitlistEntry

logger = logging.getLogger(__name__)


class PostgresWaitlistStore:
    """
    Implements WaitlistStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def insert(self, entry: WaitlistEntry) -> tuple[str, datetime]:
        """
        Insert a waitlist record.

        Args:
            entry: Sanitized entry; id and timestamp are ignored

        Returns:
            Tuple of (id, server-assigned timestamp)

        Raises:
            WaitlistStoreError: On any database error (e.g. permission denied)
        """
        sql = """
            INSERT INTO waitlist (id, full_name, email, user_id, created_at, "timestamp")
            VALUES (%s, %s, %s, %s, %s, NOW())
            RETURNING id, "timestamp"
        """
        entry_id = uuid.uuid4().hex

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql, (entry_id, entry.full_name, entry.email, entry.user_id, entry.created_at)
                )
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise WaitlistStoreError(f"Waitlist insert failed: {e}") from e

        return row[0], row[1]

    def list_ordered(self) -> list[WaitlistEntry]:
        """
        Fetch every record, most recent timestamp first.

        Ties keep the database's row order (unspecified).

        Raises:
            WaitlistStoreError: On any database error
        """
        sql = """
            SELECT id, full_name, email, user_id, created_at, "timestamp"
            FROM waitlist
            ORDER BY "timestamp" DESC
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql)
                rows = cursor.fetchall()
        except psycopg.Error as e:
            raise WaitlistStoreError(f"Waitlist query failed: {e}") from e

        return [
            WaitlistEntry(
                id=row[0],
                full_name=row[1],
                email=row[2],
                user_id=row[3],
                created_at=row[4],
                timestamp=row[5],
            )
            for row in rows
        ]


class PostgresVerificationLinkIssuer:
    """
    Implements VerificationLinkIssuer protocol via psycopg3.

    Tokens are 32 bytes from the secrets module, URL-safe encoded.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def issue(self, email: str, continue_url: str) -> str:
        """
        Mint a token for an existing account.

        The INSERT ... SELECT only inserts when an account with this
        email exists.

        Raises:
            VerificationLinkError: No such account, or database error
        """
        sql = """
            INSERT INTO email_verifications (token, email, continue_url, created_at)
            SELECT %s, email, %s, NOW()
            FROM accounts
            WHERE email = %s
        """
        token = secrets.token_urlsafe(32)

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (token, continue_url, email))
                conn.commit()
                issued = cursor.rowcount == 1
        except psycopg.Error as e:
            raise VerificationLinkError(f"Token insert failed: {e}") from e

        if not issued:
            raise VerificationLinkError(f"No account for {email}")
        return token

    def consume(self, token: str, ttl_seconds: int) -> tuple[str, str] | None:
        """
        Atomically mark a token used and return its email and continue URL.

        Returns:
            (email, continue_url), or None when the token is unknown,
            already used, or older than ttl_seconds
        """
        sql = """
            UPDATE email_verifications
            SET used_at = NOW()
            WHERE token = %s
              AND used_at IS NULL
              AND created_at > NOW() - make_interval(secs => %s)
            RETURNING email, continue_url
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (token, ttl_seconds))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise VerificationLinkError(f"Token lookup failed: {e}") from e

        if row is None:
            return None
        return row[0], row[1]


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
