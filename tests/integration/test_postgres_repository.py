"""
Integration tests for the PostgreSQL waitlist store and link issuer.

Requires PostgreSQL to be running (via docker-compose).
"""

from datetime import datetime, timezone

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresVerificationLinkIssuer, PostgresWaitlistStore
from src.domain.exceptions import VerificationLinkError, WaitlistStoreError
from src.domain.models import WaitlistEntry

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]

CREATED = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def create_account(pool: ConnectionPool, user_id: str, email: str) -> None:
    """Helper to insert an account row directly."""
    with pool.connection() as conn:
        conn.execute(
            "INSERT INTO accounts (id, email, password_hash) VALUES (%s, %s, %s)",
            (user_id, email, "not-a-real-hash"),
        )
        conn.commit()


def make_entry(user_id: str, email: str, name: str = "Jane Doe") -> WaitlistEntry:
    return WaitlistEntry(full_name=name, email=email, user_id=user_id, created_at=CREATED)


class TestWaitlistStore:
    """Tests for PostgresWaitlistStore."""

    def test_insert_assigns_id_and_server_timestamp(self, pool: ConnectionPool) -> None:
        """The store assigns the id and a timestamp distinct from created_at."""
        create_account(pool, "uid-1", "jane@example.com")
        store = PostgresWaitlistStore(pool)

        entry_id, timestamp = store.insert(make_entry("uid-1", "jane@example.com"))

        assert entry_id
        assert timestamp > CREATED

    def test_list_ordered_most_recent_first(self, pool: ConnectionPool) -> None:
        """Entries come back by descending server timestamp."""
        store = PostgresWaitlistStore(pool)
        for i in range(3):
            create_account(pool, f"uid-{i}", f"user{i}@example.com")
            store.insert(make_entry(f"uid-{i}", f"user{i}@example.com", name=f"User {chr(65 + i)}"))

        entries = store.list_ordered()

        assert [entry.email for entry in entries] == [
            "user2@example.com",
            "user1@example.com",
            "user0@example.com",
        ]
        assert entries[0].created_at == CREATED
        assert all(entry.id and entry.timestamp for entry in entries)

    def test_list_empty(self, pool: ConnectionPool) -> None:
        assert PostgresWaitlistStore(pool).list_ordered() == []

    def test_unknown_user_rejected(self, pool: ConnectionPool) -> None:
        """An entry must reference an existing account."""
        with pytest.raises(WaitlistStoreError):
            PostgresWaitlistStore(pool).insert(make_entry("uid-missing", "ghost@example.com"))

    def test_name_length_enforced(self, pool: ConnectionPool) -> None:
        """The table rejects names outside 2-100 characters."""
        create_account(pool, "uid-1", "jane@example.com")

        with pytest.raises(WaitlistStoreError):
            PostgresWaitlistStore(pool).insert(make_entry("uid-1", "jane@example.com", name="J"))


class TestVerificationLinkIssuer:
    """Tests for PostgresVerificationLinkIssuer."""

    def test_issue_and_consume_once(self, pool: ConnectionPool) -> None:
        """A token is consumable exactly once."""
        create_account(pool, "uid-1", "jane@example.com")
        issuer = PostgresVerificationLinkIssuer(pool)

        token = issuer.issue("jane@example.com", "https://onetalk.co")

        assert issuer.consume(token, 3600) == ("jane@example.com", "https://onetalk.co")
        assert issuer.consume(token, 3600) is None

    def test_issue_requires_account(self, pool: ConnectionPool) -> None:
        """No token is minted for an unknown email."""
        with pytest.raises(VerificationLinkError):
            PostgresVerificationLinkIssuer(pool).issue("ghost@example.com", "https://onetalk.co")

    def test_tokens_are_unique(self, pool: ConnectionPool) -> None:
        create_account(pool, "uid-1", "jane@example.com")
        issuer = PostgresVerificationLinkIssuer(pool)

        tokens = {issuer.issue("jane@example.com", "https://onetalk.co") for _ in range(5)}

        assert len(tokens) == 5

    def test_expired_token_rejected(self, pool: ConnectionPool) -> None:
        """Tokens older than the TTL are not consumed."""
        create_account(pool, "uid-1", "jane@example.com")
        issuer = PostgresVerificationLinkIssuer(pool)
        token = issuer.issue("jane@example.com", "https://onetalk.co")
        with pool.connection() as conn:
            conn.execute(
                "UPDATE email_verifications SET created_at = NOW() - INTERVAL '2 hours' WHERE token = %s",
                (token,),
            )
            conn.commit()

        assert issuer.consume(token, 3600) is None

    def test_unknown_token(self, pool: ConnectionPool) -> None:
        assert PostgresVerificationLinkIssuer(pool).consume("nope", 3600) is None
