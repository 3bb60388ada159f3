"""Identity provider adapters - Account management implementations."""

from .postgres import PostgresIdentityProvider

__all__ = ["PostgresIdentityProvider"]
