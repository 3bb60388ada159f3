"""Repository adapters - Database implementations."""

from .postgres import PostgresVerificationLinkIssuer, PostgresWaitlistStore, run_migrations

__all__ = ["PostgresVerificationLinkIssuer", "PostgresWaitlistStore", "run_migrations"]
