"""
Admin domain services - Waitlist listing and admin sign-in.

The admin surface is read-only: it lists persisted waitlist entries and
never mutates them. Sign-in is gated locally by the configured admin
credential pair before being delegated to the identity provider.
"""

import logging
import secrets
from dataclasses import dataclass, field

from .auth_state import AuthStateCallback, AuthStateNotifier, Unsubscribe
from .exceptions import (
    AdminSignInFailed,
    IdentityProviderError,
    InvalidAdminCredentials,
    NotConfigured,
    ReadFailed,
    WaitlistStoreError,
)
from .models import Account, WaitlistEntry
from .ports import IdentityProvider, IdentityProviderErrorCode, WaitlistStore
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


@dataclass
class AdminReadService:
    """Lists waitlist entries for the admin view."""

    waitlist_store: WaitlistStore | None

    def list_waitlist(self) -> list[WaitlistEntry]:
        """
        Return every waitlist entry, most recent first.

        No pagination and no partial results: either the full ordered
        list or a single error.

        Raises:
            NotConfigured: Waitlist persistence is disabled (no I/O attempted)
            ReadFailed: The store query failed
        """
        if self.waitlist_store is None:
            raise NotConfigured("Waitlist store is not configured")

        try:
            return self.waitlist_store.list_ordered()
        except WaitlistStoreError as e:
            logger.error("Error fetching waitlist: %s", e)
            raise ReadFailed(str(e) or "Failed to fetch waitlist data") from e


@dataclass
class AdminAuthService:
    """
    Admin sign-in, sign-out and auth state subscription.

    One instance represents one admin session.
    """

    identity_provider: IdentityProvider
    admin_email: str | None
    admin_password: str | None
    notifier: AuthStateNotifier = field(default_factory=AuthStateNotifier)

    @property
    def current_account(self) -> Account | None:
        return self.notifier.current

    def sign_in(self, email: str, password: str) -> Account:
        """
        Sign in as the admin.

        Raises:
            InvalidAdminCredentials: Credentials do not match the configured pair
            AdminSignInFailed: Identity provider refused the sign-in
        """
        normalized_email = sanitize(email).lower()
        if not self._matches_admin(normalized_email, password):
            raise InvalidAdminCredentials(normalized_email)

        try:
            account = self.identity_provider.sign_in(normalized_email, password)
        except IdentityProviderError as e:
            logger.warning("Admin login error: %s", e.code)
            if e.code in (IdentityProviderErrorCode.USER_NOT_FOUND, IdentityProviderErrorCode.WRONG_PASSWORD):
                raise AdminSignInFailed("Invalid admin credentials") from e
            if e.code == IdentityProviderErrorCode.INVALID_EMAIL:
                raise AdminSignInFailed("Invalid email format") from e
            raise AdminSignInFailed("Login failed. Please try again.") from e

        self.notifier.set(account)
        return account

    def sign_out(self) -> None:
        self.notifier.set(None)

    def subscribe(self, on_change: AuthStateCallback) -> Unsubscribe:
        """Subscribe to sign-in/sign-out transitions of this session."""
        return self.notifier.subscribe(on_change)

    def _matches_admin(self, email: str, password: str) -> bool:
        """Constant-time comparison against the configured admin pair."""
        if not self.admin_email or not self.admin_password:
            return False
        # Evaluate both comparisons regardless of the first result
        email_ok = secrets.compare_digest(email.encode(), self.admin_email.lower().encode())
        password_ok = secrets.compare_digest(password.encode(), self.admin_password.encode())
        return email_ok and password_ok
