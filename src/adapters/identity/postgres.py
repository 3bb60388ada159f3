"""
PostgreSQL identity provider adapter - Implements IdentityProvider protocol.

Accounts live in the ``accounts`` table with bcrypt password hashes.

Security Design - Timing Oracle Prevention:
------------------------------------------
sign_in always runs bcrypt.checkpw(), comparing against a pre-computed
dummy hash when the email is unknown, so response time does not reveal
whether an account exists.

Passwords are pre-hashed (base64 of SHA-256) before bcrypt, which only
accepts 72 bytes of input. Long passwords are neither rejected nor
silently truncated.
"""

import base64
import hashlib
import logging
import uuid

import bcrypt
import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import IdentityProviderError
from src.domain.models import Account
from src.domain.ports import IdentityProviderErrorCode
from src.domain.validators import is_valid_email

logger = logging.getLogger(__name__)

# Matches the hosted identity provider's own minimum password length.
MIN_PASSWORD_LENGTH = 6

_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10)).decode()


def _prehash(password: str) -> bytes:
    """44-byte bcrypt input for a password of any length."""
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


class PostgresIdentityProvider:
    """
    Implements IdentityProvider protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries; database failures surface as
    IdentityProviderError with code ``internal-error``.
    """

    def __init__(self, pool: ConnectionPool, bcrypt_cost: int = 10) -> None:
        self._pool = pool
        self._bcrypt_cost = bcrypt_cost

    def create_account(self, email: str, password: str) -> Account:
        """
        Create an account with a bcrypt-hashed password.

        Uses INSERT ... ON CONFLICT DO NOTHING; the UNIQUE constraint on
        email makes duplicate detection atomic.

        Raises:
            IdentityProviderError: invalid-email, weak-password,
                email-already-in-use or internal-error
        """
        if not is_valid_email(email):
            raise IdentityProviderError(IdentityProviderErrorCode.INVALID_EMAIL)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise IdentityProviderError(IdentityProviderErrorCode.WEAK_PASSWORD)

        user_id = uuid.uuid4().hex
        password_hash = bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=self._bcrypt_cost)).decode()
        sql = """
            INSERT INTO accounts (id, email, password_hash, created_at)
            VALUES (%s, %s, %s, NOW())
            ON CONFLICT (email) DO NOTHING
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (user_id, email, password_hash))
                conn.commit()
                created = cursor.rowcount == 1
        except psycopg.Error as e:
            logger.error("Account insert failed: %s", e)
            raise IdentityProviderError(IdentityProviderErrorCode.INTERNAL_ERROR, str(e)) from e

        if not created:
            raise IdentityProviderError(IdentityProviderErrorCode.EMAIL_ALREADY_IN_USE)
        return Account(user_id=user_id, email=email)

    def update_profile(self, user_id: str, display_name: str) -> None:
        sql = "UPDATE accounts SET display_name = %s WHERE id = %s"

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (display_name, user_id))
                conn.commit()
                updated = cursor.rowcount == 1
        except psycopg.Error as e:
            raise IdentityProviderError(IdentityProviderErrorCode.INTERNAL_ERROR, str(e)) from e

        if not updated:
            raise IdentityProviderError(IdentityProviderErrorCode.USER_NOT_FOUND)

    def sign_in(self, email: str, password: str) -> Account:
        """
        Verify credentials against the stored bcrypt hash.

        bcrypt always runs (dummy hash for unknown emails) before any
        result-dependent return.

        Raises:
            IdentityProviderError: invalid-email, user-not-found,
                wrong-password or internal-error
        """
        if not is_valid_email(email):
            raise IdentityProviderError(IdentityProviderErrorCode.INVALID_EMAIL)

        sql = """
            SELECT id, email, password_hash, display_name, email_verified
            FROM accounts
            WHERE email = %s
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                row = cursor.fetchone()
        except psycopg.Error as e:
            raise IdentityProviderError(IdentityProviderErrorCode.INTERNAL_ERROR, str(e)) from e

        stored_hash = row[2] if row is not None else _DUMMY_BCRYPT_HASH
        password_valid = bcrypt.checkpw(_prehash(password), stored_hash.encode())

        if row is None:
            raise IdentityProviderError(IdentityProviderErrorCode.USER_NOT_FOUND)
        if not password_valid:
            raise IdentityProviderError(IdentityProviderErrorCode.WRONG_PASSWORD)

        return Account(user_id=row[0], email=row[1], display_name=row[3], email_verified=row[4])

    def mark_email_verified(self, email: str) -> None:
        sql = "UPDATE accounts SET email_verified = TRUE WHERE email = %s"

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                conn.commit()
                updated = cursor.rowcount == 1
        except psycopg.Error as e:
            raise IdentityProviderError(IdentityProviderErrorCode.INTERNAL_ERROR, str(e)) from e

        if not updated:
            raise IdentityProviderError(IdentityProviderErrorCode.USER_NOT_FOUND)
