"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime
from typing import Protocol

from .models import Account, RegistrationAttemptState, WaitlistEntry


class IdentityProviderErrorCode:
    """Error codes raised by identity provider adapters."""

    EMAIL_ALREADY_IN_USE = "email-already-in-use"
    WEAK_PASSWORD = "weak-password"
    INVALID_EMAIL = "invalid-email"
    USER_NOT_FOUND = "user-not-found"
    WRONG_PASSWORD = "wrong-password"
    INTERNAL_ERROR = "internal-error"


class IdentityProvider(Protocol):
    """Port interface for account management."""

    def create_account(self, email: str, password: str) -> Account:
        """
        Create an account.

        Args:
            email: Sanitized, lower-cased email address
            password: Raw password (hashed by the provider)

        Returns:
            The created account

        Raises:
            IdentityProviderError: code is one of IdentityProviderErrorCode
        """
        ...

    def update_profile(self, user_id: str, display_name: str) -> None:
        """Set the display name on an existing account."""
        ...

    def sign_in(self, email: str, password: str) -> Account:
        """
        Verify credentials and return the account.

        Raises:
            IdentityProviderError: user-not-found, wrong-password or invalid-email
        """
        ...

    def mark_email_verified(self, email: str) -> None:
        """Flag the account's email address as verified."""
        ...


class WaitlistStore(Protocol):
    """Port interface for waitlist persistence (insert and ordered read only)."""

    def insert(self, entry: WaitlistEntry) -> tuple[str, datetime]:
        """
        Persist a waitlist entry.

        The store assigns the identifier and the server-side timestamp;
        ``entry.id`` and ``entry.timestamp`` are ignored.

        Returns:
            Tuple of (id, timestamp)

        Raises:
            WaitlistStoreError: On any write failure
        """
        ...

    def list_ordered(self) -> list[WaitlistEntry]:
        """
        Return every entry ordered by timestamp, most recent first.

        Raises:
            WaitlistStoreError: On any read failure
        """
        ...


class VerificationLinkIssuer(Protocol):
    """Port interface for single-use verification tokens."""

    def issue(self, email: str, continue_url: str) -> str:
        """
        Mint a single-use token for an existing account.

        Raises:
            VerificationLinkError: Unknown account or storage failure
        """
        ...

    def consume(self, token: str, ttl_seconds: int) -> tuple[str, str] | None:
        """
        Consume a token.

        Returns:
            Tuple of (email, continue_url), or None if the token is
            unknown, already used, or older than ttl_seconds

        Raises:
            VerificationLinkError: On storage failure
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_email(self, email: str, subject: str, html: str, text: str) -> None:
        """
        Deliver a verification email.

        Raises:
            EmailDeliveryError: On delivery failure
        """
        ...


class VerificationDispatcher(Protocol):
    """Port interface the registration workflow uses to trigger verification emails."""

    def send_verification(
        self, email: str, display_name: str | None = None, continue_url: str | None = None
    ) -> str | None:
        """Send the email; return the link only when it was not delivered."""
        ...


class AttemptStateStore(Protocol):
    """Port interface for per-session registration attempt state."""

    def get(self, session_id: str) -> RegistrationAttemptState:
        """Return the session's state (a zero state if unknown)."""
        ...

    def put(self, session_id: str, state: RegistrationAttemptState) -> None:
        """Replace the session's state."""
        ...
